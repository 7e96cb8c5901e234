"""
Utilities for configuration, logging and database sessions.
"""
