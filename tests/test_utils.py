"""
Tests for utility functions module.

Tests parse_duration(), parse_listen_addr() and get_listen_addr_from_env().
"""

import pytest

from mockserver.common import get_listen_addr_from_env, parse_duration, parse_listen_addr
from mockserver.rest import ValidationError


class TestParseDuration:
    """Test suite for parse_duration() function."""

    @pytest.mark.parametrize('value,expected', [
        ('250ms', 0.25),
        ('1.5s', 1.5),
        ('2m', 120.0),
        ('1h30m', 5400.0),
        ('1m30.5s', 90.5),
        ('500us', 0.0005),
        ('500µs', 0.0005),
        ('100ns', 1e-7),
        ('.5s', 0.5),
    ])
    def test_valid_durations(self, value, expected):
        """Test parsing durations with units."""
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize('value', [None, '', '0', 0])
    def test_zero_values(self, value):
        """Test empty and zero values mean no delay."""
        assert parse_duration(value) == 0.0

    def test_signed_durations(self):
        """Test a leading sign is honored."""
        assert parse_duration('-1s') == -1.0
        assert parse_duration('+1s') == 1.0

    @pytest.mark.parametrize('value', ['5', 'soon', '1d', '1s5', '-', 's', 3, 1.5])
    def test_invalid_durations(self, value):
        """Test rejecting malformed durations."""
        with pytest.raises(ValidationError):
            parse_duration(value)


class TestParseListenAddr:
    """Test suite for parse_listen_addr() function."""

    def test_host_and_port(self):
        assert parse_listen_addr('127.0.0.1:9090') == ('127.0.0.1', 9090)

    def test_port_only(self):
        """Test an empty host means all interfaces."""
        assert parse_listen_addr(':8080') == ('0.0.0.0', 8080)

    @pytest.mark.parametrize('addr', ['8080', 'localhost:', 'localhost:http'])
    def test_invalid_addresses(self, addr):
        with pytest.raises(ValidationError):
            parse_listen_addr(addr)


class TestGetListenAddrFromEnv:
    """Test suite for get_listen_addr_from_env() function."""

    def test_addr_set(self, monkeypatch):
        monkeypatch.setenv('ADDR', ':9999')

        assert get_listen_addr_from_env() == ':9999'

    def test_addr_unset(self, monkeypatch):
        monkeypatch.delenv('ADDR', raising=False)

        assert get_listen_addr_from_env() is None

    def test_addr_empty(self, monkeypatch):
        """Test an empty ADDR is treated as unset."""
        monkeypatch.setenv('ADDR', '')

        assert get_listen_addr_from_env() is None
