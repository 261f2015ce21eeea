from abc import ABC, abstractmethod
from typing import Any, Dict, List
from ..entities.production_record import CleanRecord


class ProductionRepository(ABC):
    """Repository interface for the durable production store."""

    @abstractmethod
    async def test_connection(self) -> bool:
        """Probe the store. Must not raise: returns False when unreachable."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Create the target table and indexes if they are absent."""
        pass

    @abstractmethod
    async def insert_records(self, records: List[CleanRecord]) -> int:
        """
        Insert one row per record, without a wrapping transaction.

        Returns:
            Number of rows actually inserted
        """
        pass

    @abstractmethod
    async def get_summary_stats(self) -> Dict[str, Any]:
        """Store-wide summary statistics."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Get the total count of production records."""
        pass
