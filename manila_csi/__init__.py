"""
Manila CSI share adapters.

This package grants and waits for Manila share access rules and builds the
volume context and secrets a CSI node plugin needs to mount Manila shares.
"""

__version__ = "0.1.0"
__all__ = ["cli", "shareadapters"]
