"""Arcade game portal: single-elimination tournament bracket engine and API."""

__version__ = "0.1.0"
