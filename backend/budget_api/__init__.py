"""
Read-only HTTP API over an Actual Budget server.
"""

__version__ = "1.0.0"
