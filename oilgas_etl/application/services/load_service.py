import logging
from typing import Any, Dict, List, Optional

import polars as pl

from ...domain.entities.production_record import CleanRecord
from ...domain.ports.repository import ProductionRepository
from ...shared.exceptions import ConfigurationException
from ...shared.responses import LoadMode, LoadResult
from ...shared.utils.timing_decorator import timed

logger = logging.getLogger(__name__)

ROUNDED_STATS = (
    "avg_oil_production",
    "total_oil_production",
    "avg_gas_production",
    "total_gas_production",
    "avg_water_cut",
    "avg_oil_gas_ratio",
)


class ProductionLoader:
    """
    Load stage with two mutually exclusive strategies.

    DURABLE persists every record through the repository and reports
    store-wide statistics; IN_MEMORY only aggregates the given records.
    """

    def __init__(self, repository: Optional[ProductionRepository] = None):
        self.repository = repository

    async def load(self, records: List[CleanRecord], mode: LoadMode) -> LoadResult:
        if mode == LoadMode.DURABLE:
            return await self._load_durable(records)
        loaded = len(records)
        return LoadResult(records_loaded=loaded, summary_stats=self.compute_statistics(records), mode=mode)

    async def _load_durable(self, records: List[CleanRecord]) -> LoadResult:
        if self.repository is None:
            raise ConfigurationException("Durable load requested without a repository", setting="DATABASE_PATH")

        await self.repository.initialize()
        loaded = await self.repository.insert_records(records)
        stats = await self.repository.get_summary_stats()
        return LoadResult(records_loaded=loaded, summary_stats=stats, mode=LoadMode.DURABLE)

    @staticmethod
    @timed
    def compute_statistics(records: List[CleanRecord]) -> Dict[str, Any]:
        """Aggregate production statistics over the records; empty input gives {}"""
        if not records:
            return {}

        df = pl.DataFrame([record.model_dump() for record in records], infer_schema_length=None)
        status = pl.col("status").str.to_lowercase()
        ratio = pl.col("oil_gas_ratio")

        row = df.select(
            pl.len().alias("total_records"),
            pl.col("well_id").n_unique().alias("unique_wells"),
            pl.col("oil_production").mean().alias("avg_oil_production"),
            pl.col("oil_production").sum().alias("total_oil_production"),
            pl.col("gas_production").mean().alias("avg_gas_production"),
            pl.col("gas_production").sum().alias("total_gas_production"),
            pl.col("water_cut").mean().alias("avg_water_cut"),
            ratio.filter(ratio > 0).mean().alias("avg_oil_gas_ratio"),
            pl.col("production_date").min().alias("earliest_date"),
            pl.col("production_date").max().alias("latest_date"),
            (status == "active").sum().alias("active_wells"),
            (status == "shutdown").sum().alias("shutdown_wells"),
            (status == "maintenance").sum().alias("maintenance_wells"),
        ).row(0, named=True)

        # No record with a positive ratio leaves the mean undefined
        if row["avg_oil_gas_ratio"] is None:
            row["avg_oil_gas_ratio"] = 0.0

        return {
            key: round(float(value), 2) if key in ROUNDED_STATS else value
            for key, value in row.items()
        }
