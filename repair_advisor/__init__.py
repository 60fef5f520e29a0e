"""Repair Advisor — AI repair analysis for phones and tablets."""

__version__ = "0.1.0"
