"""Huddle: community and event discovery API."""

__version__ = "0.1.0"
