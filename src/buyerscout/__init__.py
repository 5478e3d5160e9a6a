"""
buyerscout: match Florida land listings against a database of land buyers.
"""

__version__ = "0.1.0"
