#!/usr/bin/env python3
"""
Entry point for manila-csi CLI tool.
"""

import sys

from manila_csi.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
