#!/usr/bin/env python3
"""
Cycle arbitrage engine runner.
"""
import sys

from cycle_arbitrage.cli import main

if __name__ == "__main__":
    sys.exit(main())
