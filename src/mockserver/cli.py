"""
Mock Server CLI

Command-line interface for the mock server.

Commands:
    serve       - Start the mock HTTP server
    validate    - Validate a config file without serving

Examples:
    # Serve endpoints from config.yaml on :8080
    mock-server serve

    # Custom config and port
    mock-server serve --config endpoints.yaml --port 9090

    # Check a config file
    mock-server validate --config endpoints.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from .common import get_listen_addr_from_env, parse_listen_addr
from .common.utils import DEFAULT_ADDR
from .config import load_endpoints
from .mock import MockServer, MockConfig
from .rest import MockServerError


logger = logging.getLogger("mockserver.cli")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str):
    """Configure root logging for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        stream=sys.stdout
    )


def cmd_serve(args):
    """
    Start the mock server.

    Args:
        args: Parsed command-line arguments
    """
    print(f"🎭 Mock Server")
    print(f"   Config file: {args.config}")

    try:
        host, port = parse_listen_addr(get_listen_addr_from_env() or DEFAULT_ADDR)
        endpoints = load_endpoints(args.config)
    except MockServerError as e:
        logger.error(f"Failed to build endpoints: {e}")
        print(f"❌ Failed to build endpoints: {e}")
        sys.exit(1)

    config = MockConfig(
        host=args.host or host,
        port=args.port or port,
        log_level=args.log_level,
        admin_enabled=not args.no_admin,
        access_log=not args.no_access_log
    )

    try:
        server = MockServer(endpoints, config=config)
    except MockServerError as e:
        logger.error(f"Failed to register endpoints: {e}")
        print(f"❌ Failed to register endpoints: {e}")
        sys.exit(1)

    # Start server (blocking)
    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Mock server stopped")


def cmd_validate(args):
    """
    Validate a config file and list its endpoints.

    Args:
        args: Parsed command-line arguments
    """
    print(f"✓ Mock Server Config Validation")
    print(f"   Config file: {args.config}")

    try:
        endpoints = load_endpoints(args.config)
        # Registration catches duplicate patterns
        MockServer(endpoints, config=MockConfig(admin_enabled=False, log_level=args.log_level))
    except MockServerError as e:
        print(f"❌ Invalid config: {e}")
        sys.exit(1)

    print(f"   Endpoints: {len(endpoints)}")
    print()
    for endpoint in endpoints:
        print(f"   • {endpoint.method or '*':<7} {endpoint.path} ({endpoint.resolver.name})")
    print()
    print("✅ Config is valid")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Mock Server - configurable fake HTTP backend for integration testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve endpoints from config.yaml (listen address from $ADDR, default :8080)
  %(prog)s serve

  # Serve a specific config on another port
  %(prog)s serve --config endpoints.yaml --port 9090

  # Validate a config file
  %(prog)s validate --config endpoints.yaml
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', help='Start mock HTTP server')
    serve_parser.add_argument('-c', '--config', default='config.yaml', help='Path to config file (default: config.yaml)')
    serve_parser.add_argument('--host', help='Host to bind (default: from $ADDR, else 0.0.0.0)')
    serve_parser.add_argument('-p', '--port', type=int, help='Port to bind (default: from $ADDR, else 8080)')
    serve_parser.add_argument('--log-level', default='info', choices=['debug', 'info', 'warning', 'error'],
                              help='Log level (default: info)')
    serve_parser.add_argument('--no-admin', action='store_true', help='Disable admin API')
    serve_parser.add_argument('--no-access-log', action='store_true', help='Disable uvicorn access log')

    # --- VALIDATE command ---
    validate_parser = subparsers.add_parser('validate', help='Validate a config file')
    validate_parser.add_argument('-c', '--config', default='config.yaml', help='Path to config file (default: config.yaml)')
    validate_parser.add_argument('--log-level', default='warning', choices=['debug', 'info', 'warning', 'error'],
                                 help='Log level (default: warning)')

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level)

    # Dispatch to command handler
    if args.command == 'serve':
        cmd_serve(args)
    elif args.command == 'validate':
        cmd_validate(args)


if __name__ == '__main__':
    main()
