"""
Unit tests for the business normalization stage.
"""

import logging

import pytest

from oilgas_etl.application.services import ProductionTransformer
from oilgas_etl.domain.entities import CleanRecord
from tests.conftest import build_raw_record


@pytest.fixture
def transformer():
    return ProductionTransformer()


class TestNormalization:

    @pytest.mark.parametrize("status", ["inactive", "Inactive", "INACTIVE"])
    def test_inactive_becomes_shutdown(self, transformer, status):
        [record] = transformer.transform([build_raw_record(status=status)])
        assert record.status == "Shutdown"

    @pytest.mark.parametrize("status", ["Active", "Maintenance", "Shutdown"])
    def test_other_statuses_are_untouched(self, transformer, status):
        [record] = transformer.transform([build_raw_record(status=status)])
        assert record.status == status

    def test_negative_volumes_are_clamped(self, transformer):
        raw = build_raw_record(oil_production=-5, gas_production=-1, water_production=-0.5)
        [record] = transformer.transform([raw])
        assert (record.oil_production, record.gas_production, record.water_production) == (0.0, 0.0, 0.0)
        assert record.oil_gas_ratio == 0.0
        assert record.water_cut == 0.0

    def test_normalize_returns_same_object_when_nothing_changes(self, transformer):
        raw = build_raw_record()
        assert transformer.normalize(raw) is raw


class TestTransform:

    def test_produces_clean_records_with_metrics(self, transformer):
        [record] = transformer.transform([build_raw_record(oil_production=500, gas_production=2000)])
        assert isinstance(record, CleanRecord)
        assert record.oil_gas_ratio == 250.0

    def test_rejects_records_that_stay_invalid(self, transformer, caplog):
        caplog.set_level(logging.WARNING)
        records = [
            build_raw_record(well_id="A"),
            build_raw_record(well_id="B", temperature=400),
            build_raw_record(well_id="C"),
        ]
        result = transformer.transform(records)
        assert [r.well_id for r in result] == ["A", "C"]
        assert "Rejected invalid record for well 'B'" in caplog.text

    def test_keeps_input_order_and_duplicates(self, transformer):
        records = [build_raw_record(well_id=w) for w in ["W3", "W1", "W3", "W2"]]
        assert [r.well_id for r in transformer.transform(records)] == ["W3", "W1", "W3", "W2"]

    def test_empty_input(self, transformer):
        assert transformer.transform([]) == []

    def test_is_idempotent(self, transformer):
        records = [
            build_raw_record(well_id="W1", status="inactive", oil_production=-3),
            build_raw_record(well_id="W2", status="Maintenance", gas_production=0),
        ]
        once = transformer.transform(records)
        twice = transformer.transform(once)
        assert twice == once
        assert [r.model_dump() for r in twice] == [r.model_dump() for r in once]
