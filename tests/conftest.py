"""
Pytest configuration and shared fixtures for the production ETL tests.
"""

from datetime import date
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from oilgas_etl.application.services import CsvProductionExtractor
from oilgas_etl.domain.entities import CleanRecord, RawRecord
from oilgas_etl.domain.ports import ProductionRepository

CSV_HEADER = "WellId,ProductionDate,OilProduction,GasProduction,WaterProduction,WellheadPressure,Temperature,Status,Comments"


@pytest.fixture
def etl_dirs(tmp_path):
    """Input, processed and error directories under a temporary root."""
    dirs = SimpleNamespace(
        input=tmp_path / "input",
        processed=tmp_path / "processed",
        error=tmp_path / "error",
    )
    for path in vars(dirs).values():
        path.mkdir()
    return dirs


@pytest.fixture
def write_csv():
    """Write a CSV file from raw lines, prefixed with the standard header unless told otherwise."""
    def _write(directory: Path, name: str, rows: List[str], header: Optional[str] = CSV_HEADER) -> Path:
        lines = ([header] if header is not None else []) + rows
        path = directory / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def extractor(etl_dirs):
    return CsvProductionExtractor(
        input_dir=etl_dirs.input,
        processed_dir=etl_dirs.processed,
        error_dir=etl_dirs.error,
    )


def build_raw_record(**overrides: Any) -> RawRecord:
    data: Dict[str, Any] = {
        "well_id": "WELL-001",
        "production_date": date(2024, 1, 15),
        "oil_production": 500.0,
        "gas_production": 2000.0,
        "water_production": 100.0,
        "wellhead_pressure": 85.0,
        "temperature": 140.0,
        "status": "Active",
        "comments": None,
    }
    data.update(overrides)
    return RawRecord(**data)


def build_clean_record(**overrides: Any) -> CleanRecord:
    return CleanRecord.from_raw(build_raw_record(**overrides))


@pytest.fixture
def raw_record_factory():
    return build_raw_record


@pytest.fixture
def clean_record_factory():
    return build_clean_record


class FakeRepository(ProductionRepository):
    """In-process repository double that records calls."""

    def __init__(self, reachable: bool = True, insert_error: Optional[Exception] = None):
        self.reachable = reachable
        self.insert_error = insert_error
        self.initialized = False
        self.rows: List[CleanRecord] = []
        self.calls: List[str] = []

    async def test_connection(self) -> bool:
        self.calls.append("test_connection")
        return self.reachable

    async def initialize(self) -> None:
        self.calls.append("initialize")
        self.initialized = True

    async def insert_records(self, records: List[CleanRecord]) -> int:
        self.calls.append("insert_records")
        if self.insert_error is not None:
            raise self.insert_error
        self.rows.extend(records)
        return len(records)

    async def get_summary_stats(self) -> Dict[str, Any]:
        self.calls.append("get_summary_stats")
        return {"total_records": len(self.rows)}

    async def count(self) -> int:
        return len(self.rows)


@pytest.fixture
def fake_repository():
    return FakeRepository()
