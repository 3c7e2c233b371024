"""Testimony & deposition prep tools"""

__version__ = "0.1.0"
