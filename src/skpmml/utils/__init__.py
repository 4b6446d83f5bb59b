"""Shared utilities (logging setup, value formatting and type inference)."""
