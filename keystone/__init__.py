"""Keystone: ordered maintenance runs for Arch-family systems."""

__version__ = "0.3.0"
