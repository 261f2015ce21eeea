import asyncio
import logging
import time
from typing import Any, Dict, Optional

from ...domain.ports.repository import ProductionRepository
from ...shared.responses import LoadMode, PipelineResult, PipelineState
from .extraction_service import CsvProductionExtractor
from .load_service import ProductionLoader
from .transformation_service import ProductionTransformer

logger = logging.getLogger(__name__)


class EtlOrchestrator:
    """
    Runs Extract -> Transform -> Load once per call and reports a PipelineResult.

    State machine:
        idle -> extracting -> transforming -> loading -> succeeded | failed
    An empty extraction goes straight to succeeded. Any exception raised by a
    stage ends the run in failed; stages are never retried.
    """

    def __init__(
        self,
        extractor: CsvProductionExtractor,
        transformer: ProductionTransformer,
        loader: ProductionLoader,
        repository: Optional[ProductionRepository] = None,
        use_database_mode: bool = False
    ):
        self.extractor = extractor
        self.transformer = transformer
        self.loader = loader
        self.repository = repository
        self.use_database_mode = use_database_mode
        self.state = PipelineState.IDLE

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state {self.state.value} -> {state.value}")
        self.state = state

    async def _select_load_mode(self) -> LoadMode:
        """Probe the store when database mode was requested; degrade to in-memory on failure."""
        if not self.use_database_mode:
            return LoadMode.IN_MEMORY
        if self.repository is None:
            logger.warning("Database mode requested but no store is configured, switching to in-memory analysis")
            return LoadMode.IN_MEMORY
        if await self.repository.test_connection():
            return LoadMode.DURABLE
        logger.warning("Database connection failed, switching to in-memory analysis")
        return LoadMode.IN_MEMORY

    async def run(self) -> PipelineResult:
        self.state = PipelineState.IDLE
        start_time = time.perf_counter()
        counts: Dict[str, Any] = {}

        logger.info("=== Oil & Gas ETL Pipeline Started ===")
        logger.info(f"Mode: {'Database' if self.use_database_mode else 'In-Memory'}")

        try:
            self._transition(PipelineState.EXTRACTING)
            logger.info("Step 1: Extracting data from CSV files...")
            extracted = await asyncio.to_thread(self.extractor.extract_all)
            counts["records_extracted"] = len(extracted)

            if not extracted:
                logger.warning("No data extracted. ETL pipeline completed with no processing.")
                self._transition(PipelineState.SUCCEEDED)
                return self._finish(start_time, success=True, **counts)

            self._transition(PipelineState.TRANSFORMING)
            logger.info("Step 2: Transforming and validating data...")
            clean_records = self.transformer.transform(extracted)
            counts["records_transformed"] = len(clean_records)
            counts["records_rejected"] = len(extracted) - len(clean_records)

            self._transition(PipelineState.LOADING)
            logger.info("Step 3: Loading data...")
            mode = await self._select_load_mode()
            counts["load_mode"] = mode
            load_result = await self.loader.load(clean_records, mode)
            counts["records_loaded"] = load_result.records_loaded
            counts["summary_stats"] = load_result.summary_stats

            self._transition(PipelineState.SUCCEEDED)
            result = self._finish(start_time, success=True, **counts)
            log_pipeline_summary(result)
            return result

        except Exception as e:
            logger.error(f"ETL Pipeline failed during {self.state.value}: {e}", exc_info=True)
            self._transition(PipelineState.FAILED)
            return self._finish(start_time, success=False, error_message=str(e), **counts)

        finally:
            logger.info("=== Oil & Gas ETL Pipeline Completed ===")

    def _finish(self, start_time: float, **fields) -> PipelineResult:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return PipelineResult(execution_time_ms=elapsed_ms, final_state=self.state, **fields)


def log_pipeline_summary(result: PipelineResult) -> None:
    logger.info("=== ETL Pipeline Summary ===")
    logger.info(f"Success: {result.success}")
    logger.info(f"Processing Time: {result.execution_time_ms:.2f} ms")
    logger.info(f"Records Extracted: {result.records_extracted}")
    logger.info(f"Records Transformed: {result.records_transformed}")
    logger.info(f"Records Loaded: {result.records_loaded}")
    logger.info(f"Records Rejected: {result.records_rejected}")
    if result.load_mode is not None:
        logger.info(f"Load Mode: {result.load_mode.value}")

    if result.summary_stats:
        logger.info("=== Production Summary ===")
        for key, value in result.summary_stats.items():
            logger.info(f"{key}: {value}")
