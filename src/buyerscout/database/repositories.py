"""
Repositories over the static buyer database.

The buyer database is a JSON export (a list of buyer objects) read
once into memory.
"""

import json
from pathlib import Path
from typing import Optional, Union

import structlog

from buyerscout.config import get_settings
from buyerscout.models import BuyerProfile

logger = structlog.get_logger()


class BuyerRepository:
    """Read-only access to the buyers JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path or get_settings().buyers_data_path)
        self._buyers: Optional[list[BuyerProfile]] = None

    def _load(self) -> list[BuyerProfile]:
        """
        Reads and validates the JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the top-level value is not a list
            pydantic.ValidationError: If a record is malformed
        """
        with self.path.open(encoding="utf-8") as fh:
            payload = json.load(fh)

        if not isinstance(payload, list):
            raise ValueError(f"{self.path} must contain a JSON list of buyers")

        buyers = [BuyerProfile.model_validate(record) for record in payload]
        logger.info("Buyers loaded", path=str(self.path), total=len(buyers))
        return buyers

    def list(self) -> list[BuyerProfile]:
        """Returns every buyer."""
        if self._buyers is None:
            self._buyers = self._load()
        return list(self._buyers)

    def get(self, buyer_id: Union[str, int]) -> Optional[BuyerProfile]:
        """Gets a buyer by id (compared as a string)."""
        wanted = str(buyer_id)
        for buyer in self.list():
            if buyer.id == wanted:
                return buyer
        return None
