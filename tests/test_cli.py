"""
Tests for the Mock Server CLI

Tests argument parsing and the serve/validate commands with the server
start patched out.
"""

from unittest.mock import patch

import pytest

from mockserver import cli


@pytest.fixture
def config_file(tmp_path):
    """Create a valid config file."""
    path = tmp_path / 'config.yaml'
    path.write_text("""
endpoints:
  - path: /health
    response:
      static:
        body:
          literal: ok
  - path: /users
    method: GET
    response:
      sequence:
        endBehavior: loop
        responses:
          - response:
              status: 200
""")
    return str(path)


@pytest.fixture
def bad_config_file(tmp_path):
    """Create a config file with two strategies on one endpoint."""
    path = tmp_path / 'bad.yaml'
    path.write_text("""
endpoints:
  - path: /health
    response:
      static: {}
      weighted:
        - weight: 1
          response: {}
""")
    return str(path)


@pytest.fixture
def no_logging_setup():
    """Keep the CLI from reconfiguring root logging during tests."""
    with patch('mockserver.cli.setup_logging'):
        yield


class TestBuildParser:
    """Test argument parsing."""

    def test_serve_defaults(self):
        args = cli.build_parser().parse_args(['serve'])

        assert args.command == 'serve'
        assert args.config == 'config.yaml'
        assert args.host is None
        assert args.port is None
        assert args.log_level == 'info'
        assert args.no_admin is False
        assert args.no_access_log is False

    def test_serve_overrides(self):
        args = cli.build_parser().parse_args([
            'serve', '-c', 'endpoints.yaml', '--host', '127.0.0.1', '-p', '9090', '--no-admin'
        ])

        assert args.config == 'endpoints.yaml'
        assert args.host == '127.0.0.1'
        assert args.port == 9090
        assert args.no_admin is True

    def test_validate_defaults(self):
        args = cli.build_parser().parse_args(['validate'])

        assert args.command == 'validate'
        assert args.log_level == 'warning'


class TestMain:
    """Test main() command dispatch."""

    def test_no_command(self, capsys):
        """Test running without a command prints help and fails."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])

        assert exc_info.value.code == 1
        assert 'serve' in capsys.readouterr().out

    def test_validate_good_config(self, config_file, capsys, no_logging_setup):
        cli.main(['validate', '--config', config_file])

        out = capsys.readouterr().out
        assert 'Endpoints: 2' in out
        assert 'Config is valid' in out

    def test_validate_bad_config(self, bad_config_file, capsys, no_logging_setup):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(['validate', '--config', bad_config_file])

        assert exc_info.value.code == 1
        assert 'exactly one response strategy' in capsys.readouterr().out

    def test_validate_missing_config(self, tmp_path, no_logging_setup):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(['validate', '--config', str(tmp_path / 'missing.yaml')])

        assert exc_info.value.code == 1


class TestServe:
    """Test the serve command."""

    def test_serve_uses_default_addr(self, config_file, monkeypatch, mocker, no_logging_setup):
        """Test the server binds :8080 when nothing overrides it."""
        monkeypatch.delenv('ADDR', raising=False)
        mock_server_cls = mocker.patch('mockserver.cli.MockServer')

        cli.main(['serve', '--config', config_file])

        config = mock_server_cls.call_args.kwargs['config']
        assert config.host == '0.0.0.0'
        assert config.port == 8080
        assert config.admin_enabled is True
        mock_server_cls.return_value.start.assert_called_once()

    def test_serve_reads_addr_env(self, config_file, monkeypatch, no_logging_setup):
        monkeypatch.setenv('ADDR', '127.0.0.1:9191')

        with patch('mockserver.cli.MockServer') as mock_server_cls:
            cli.main(['serve', '--config', config_file])

        config = mock_server_cls.call_args.kwargs['config']
        assert config.host == '127.0.0.1'
        assert config.port == 9191

    def test_flags_override_addr_env(self, config_file, monkeypatch, no_logging_setup):
        monkeypatch.setenv('ADDR', '127.0.0.1:9191')

        with patch('mockserver.cli.MockServer') as mock_server_cls:
            cli.main(['serve', '--config', config_file, '--port', '7070', '--no-access-log'])

        config = mock_server_cls.call_args.kwargs['config']
        assert config.port == 7070
        assert config.access_log is False

    def test_serve_bad_config_exits(self, bad_config_file, no_logging_setup):
        """Test serving an invalid config fails before starting."""
        with patch('mockserver.cli.MockServer') as mock_server_cls:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(['serve', '--config', bad_config_file])

        assert exc_info.value.code == 1
        mock_server_cls.assert_not_called()

    def test_serve_bad_addr_exits(self, config_file, monkeypatch, no_logging_setup):
        monkeypatch.setenv('ADDR', 'nonsense')

        with pytest.raises(SystemExit) as exc_info:
            cli.main(['serve', '--config', config_file])

        assert exc_info.value.code == 1

    def test_keyboard_interrupt_stops_cleanly(self, config_file, monkeypatch, no_logging_setup):
        monkeypatch.delenv('ADDR', raising=False)

        with patch('mockserver.mock.server.uvicorn.run', side_effect=KeyboardInterrupt):
            cli.main(['serve', '--config', config_file])

    def test_serve_non_string_body_exits(self, tmp_path, no_logging_setup, capsys):
        """Test a malformed body fails with a message, not a traceback."""
        path = tmp_path / 'config.yaml'
        path.write_text("""
endpoints:
  - path: /x
    response:
      static:
        body:
          literal: 123
""")

        with patch('mockserver.cli.MockServer') as mock_server_cls:
            with pytest.raises(SystemExit) as exc_info:
                cli.main(['serve', '--config', str(path)])

        assert exc_info.value.code == 1
        assert 'literal must be a string' in capsys.readouterr().out
        mock_server_cls.assert_not_called()
