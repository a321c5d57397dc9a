#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Branch Ranking: Main Entry Point
================================

Usage
-----
    python main.py branches.csv
    python main.py branches.csv --weights weights.json --sensitivity --plots

See ``coop_mcda.cli`` for all options.
"""

import sys

from coop_mcda.cli import main


if __name__ == '__main__':
    sys.exit(main())
