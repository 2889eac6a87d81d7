#!/usr/bin/env python3
"""
RRT — Entry Point
==================

Decode, verify and generate registrar verification tokens.

Usage:
    python main.py decode 0000000012345TWRAJQFIZWW
    python main.py decode "11-00-42-00_12345 TW/BABAEFGH:E" --separator " "
    python main.py new --token-version 1 --network 2 --index 1 --case-id 11041 --channel TW
"""

from __future__ import annotations

import sys

from rrt.cli import main

if __name__ == "__main__":
    sys.exit(main())
