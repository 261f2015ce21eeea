"""
Unit tests for the pipeline state machine, using in-process stage doubles.
"""

import pytest

from oilgas_etl.application.services import EtlOrchestrator, ProductionLoader, ProductionTransformer
from oilgas_etl.shared.exceptions import DatabaseException
from oilgas_etl.shared.responses import LoadMode, PipelineState
from tests.conftest import FakeRepository, build_raw_record


class StubExtractor:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = 0

    def extract_all(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


class RecordingTransformer(ProductionTransformer):
    def __init__(self):
        self.calls = 0

    def transform(self, records):
        self.calls += 1
        return super().transform(records)


def build_orchestrator(extractor, repository=None, use_database_mode=False, transformer=None):
    return EtlOrchestrator(
        extractor=extractor,
        transformer=transformer or RecordingTransformer(),
        loader=ProductionLoader(repository),
        repository=repository,
        use_database_mode=use_database_mode,
    )


@pytest.fixture
def raw_records():
    return [
        build_raw_record(well_id="W1", status="inactive"),
        build_raw_record(well_id="W2", gas_production=0),
        build_raw_record(well_id="W3", temperature=300),
    ]


class TestPipelineRun:

    def test_starts_idle(self):
        assert build_orchestrator(StubExtractor()).state == PipelineState.IDLE

    @pytest.mark.asyncio
    async def test_in_memory_run(self, raw_records):
        orchestrator = build_orchestrator(StubExtractor(raw_records))

        result = await orchestrator.run()

        assert result.success is True
        assert result.final_state == PipelineState.SUCCEEDED
        assert orchestrator.state == PipelineState.SUCCEEDED
        assert result.load_mode == LoadMode.IN_MEMORY
        assert result.records_extracted == 3
        assert result.records_transformed == 2
        assert result.records_rejected == 1
        assert result.records_loaded == result.records_transformed
        assert result.summary_stats["shutdown_wells"] == 1
        assert result.error_message is None
        assert result.execution_time_ms >= 0

    @pytest.mark.asyncio
    async def test_empty_extraction_short_circuits(self):
        transformer = RecordingTransformer()
        orchestrator = build_orchestrator(StubExtractor([]), transformer=transformer)

        result = await orchestrator.run()

        assert result.success is True
        assert result.final_state == PipelineState.SUCCEEDED
        assert result.records_extracted == 0
        assert result.records_transformed == 0
        assert result.records_loaded == 0
        assert result.summary_stats == {}
        assert result.load_mode is None
        assert transformer.calls == 0

    @pytest.mark.asyncio
    async def test_extraction_error_fails_the_run(self):
        orchestrator = build_orchestrator(StubExtractor(error=RuntimeError("input volume gone")))

        result = await orchestrator.run()

        assert result.success is False
        assert result.final_state == PipelineState.FAILED
        assert orchestrator.state == PipelineState.FAILED
        assert result.error_message == "input volume gone"
        assert orchestrator.state.is_terminal
        assert result.records_extracted == 0

    @pytest.mark.asyncio
    async def test_each_run_starts_from_idle(self, raw_records):
        extractor = StubExtractor(raw_records)
        orchestrator = build_orchestrator(extractor)

        first = await orchestrator.run()
        second = await orchestrator.run()

        assert extractor.calls == 2
        assert first.records_loaded == second.records_loaded == 2


class TestLoadModeSelection:

    @pytest.mark.asyncio
    async def test_durable_mode_when_store_is_reachable(self, raw_records, fake_repository):
        orchestrator = build_orchestrator(StubExtractor(raw_records), fake_repository, use_database_mode=True)

        result = await orchestrator.run()

        assert result.success is True
        assert result.load_mode == LoadMode.DURABLE
        assert result.records_loaded == 2
        assert fake_repository.calls == ["test_connection", "initialize", "insert_records", "get_summary_stats"]

    @pytest.mark.asyncio
    async def test_falls_back_to_in_memory_when_probe_fails(self, raw_records, caplog):
        repository = FakeRepository(reachable=False)
        orchestrator = build_orchestrator(StubExtractor(raw_records), repository, use_database_mode=True)

        result = await orchestrator.run()

        assert result.success is True
        assert result.load_mode == LoadMode.IN_MEMORY
        assert result.records_loaded == result.records_transformed == 2
        assert result.summary_stats["total_records"] == 2
        assert repository.calls == ["test_connection"]
        assert "switching to in-memory analysis" in caplog.text

    @pytest.mark.asyncio
    async def test_database_mode_without_repository_uses_in_memory(self, raw_records):
        orchestrator = build_orchestrator(StubExtractor(raw_records), None, use_database_mode=True)

        result = await orchestrator.run()

        assert result.success is True
        assert result.load_mode == LoadMode.IN_MEMORY

    @pytest.mark.asyncio
    async def test_in_memory_mode_never_probes(self, raw_records, fake_repository):
        orchestrator = build_orchestrator(StubExtractor(raw_records), fake_repository, use_database_mode=False)

        await orchestrator.run()

        assert fake_repository.calls == []

    @pytest.mark.asyncio
    async def test_store_write_failure_is_fatal(self, raw_records):
        repository = FakeRepository(insert_error=DatabaseException("constraint violated"))
        orchestrator = build_orchestrator(StubExtractor(raw_records), repository, use_database_mode=True)

        result = await orchestrator.run()

        assert result.success is False
        assert result.final_state == PipelineState.FAILED
        assert result.error_message == "constraint violated"
        # counts already populated before the failure are kept
        assert result.records_extracted == 3
        assert result.records_transformed == 2
        assert result.records_loaded == 0
        assert result.load_mode == LoadMode.DURABLE
