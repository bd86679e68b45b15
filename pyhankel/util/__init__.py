"""Logging and error utilities for pyhankel."""
