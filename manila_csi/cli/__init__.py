"""Command line interface for Manila CSI share adapters."""
