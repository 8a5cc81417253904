"""Search, rendering and shortening of Skript syntax documentation."""

__version__ = "0.1.0"
