"""Thunderdome planning poker backend."""

__version__ = "0.1.0"
