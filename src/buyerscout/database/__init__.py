"""
Database module.

Provides read access to the buyer database.
"""

from buyerscout.database.repositories import BuyerRepository

__all__ = [
    "BuyerRepository",
]
