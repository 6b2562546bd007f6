#!/usr/bin/env python3
"""
Mock Server - configurable fake HTTP backend

This is a convenience wrapper that calls the packaged implementation.
The actual implementation is in src/mockserver/cli.py

Usage:
    python mock-server.py serve --config config.yaml --port 8080

For more information, run with --help
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from mockserver.cli import main

if __name__ == '__main__':
    main()
