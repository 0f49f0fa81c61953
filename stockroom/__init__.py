"""
Stockroom: inventory and order management service.
"""

__version__ = "1.0.0"
