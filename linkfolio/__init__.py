"""Linkfolio - link-in-bio API."""

__version__ = "0.1.0"
