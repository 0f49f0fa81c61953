"""
Core package for shared utilities: settings, logging, errors and rate limits.
"""
