#!/usr/bin/env python3
"""
Main entry point for the sleep-leaderboard job, e.g. from a scheduled workflow.
"""

import sys

from sleep_leaderboard.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:] or ["run"]))
