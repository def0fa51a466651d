"""CLI support code."""
