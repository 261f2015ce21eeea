import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import duckdb

from ...domain.entities.production_record import CleanRecord
from ...domain.ports.repository import ProductionRepository
from ...shared.exceptions import DatabaseException
from ...shared.utils.sql_loader import load_sql
from ...shared.utils.timing_decorator import async_timed

logger = logging.getLogger(__name__)

DEFAULT_SQL_PATH = Path(__file__).parent.parent / "operations" / "production.sql"


class DuckDBProductionRepository(ProductionRepository):
    """DuckDB implementation of the durable production store."""

    def __init__(self, db_path: Union[str, Path], sql_path: Optional[Path] = None):
        self.db_path = str(db_path)
        self.queries = load_sql(sql_path or DEFAULT_SQL_PATH)

    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(self.db_path)

    async def test_connection(self) -> bool:
        """Open a connection and run a trivial query."""
        def _probe_sync():
            with self._connect() as conn:
                conn.execute(self.queries["probe"]).fetchone()

        try:
            await asyncio.to_thread(_probe_sync)
        except (duckdb.Error, OSError) as e:
            logger.warning(f"Database connection test failed for {self.db_path}: {e}")
            return False
        logger.info("Database connection test successful")
        return True

    async def initialize(self) -> None:
        """Create the sequence, table and (well_id, production_date) index if absent."""
        def _initialize_sync():
            with self._connect() as conn:
                for name in ("create_sequence", "create_table", "create_index"):
                    conn.execute(self.queries[name])

        try:
            await asyncio.to_thread(_initialize_sync)
        except duckdb.Error as e:
            logger.error(f"Failed to initialize database {self.db_path}: {e}")
            raise DatabaseException(
                message=f"Failed to initialize database: {e}",
                query=self.queries["create_table"],
                cause=e
            )
        logger.info("Database table initialized successfully")

    @staticmethod
    def _record_to_params(record: CleanRecord) -> list:
        return [
            record.well_id,
            record.production_date,
            record.oil_production,
            record.gas_production,
            record.water_production,
            record.wellhead_pressure,
            record.temperature,
            record.status,
            record.comments,
            record.oil_gas_ratio,
            record.water_cut,
        ]

    @async_timed
    async def insert_records(self, records: List[CleanRecord]) -> int:
        """Insert records one row at a time; rows inserted before a failure stay committed."""
        if not records:
            return 0

        query = self.queries["insert_record"]

        def _insert_sync() -> int:
            inserted = 0
            with self._connect() as conn:
                for record in records:
                    try:
                        conn.execute(query, self._record_to_params(record))
                    except duckdb.Error as e:
                        raise DatabaseException(
                            message=(
                                f"Failed to insert record for well {record.well_id} "
                                f"on {record.production_date} after {inserted} rows: {e}"
                            ),
                            query=query,
                            cause=e
                        ) from e
                    inserted += 1
            return inserted

        try:
            inserted_count = await asyncio.to_thread(_insert_sync)
        except DatabaseException as e:
            logger.error(f"Failed to insert production data into database: {e.message}")
            raise
        except duckdb.Error as e:
            logger.error(f"Failed to insert production data into database: {e}")
            raise DatabaseException(message=f"Database unavailable during insert: {e}", cause=e) from e

        logger.info(f"Successfully inserted {inserted_count} production records")
        return inserted_count

    async def get_summary_stats(self) -> Dict[str, Any]:
        """Aggregate the whole table; returns an empty mapping if the query fails."""
        def _stats_sync() -> Dict[str, Any]:
            with self._connect() as conn:
                cursor = conn.execute(self.queries["summary_stats"])
                columns = [column[0] for column in cursor.description]
                row = cursor.fetchone()
            return dict(zip(columns, row)) if row else {}

        try:
            return await asyncio.to_thread(_stats_sync)
        except duckdb.Error as e:
            logger.warning(f"Failed to retrieve summary statistics: {e}")
            return {}

    async def count(self) -> int:
        """Get the total count of production records."""
        def _count_sync() -> int:
            with self._connect() as conn:
                return conn.execute(self.queries["count"]).fetchone()[0]

        return await asyncio.to_thread(_count_sync)
