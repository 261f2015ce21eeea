"""
Command-line entry point for the Oil & Gas production ETL job.
Exit code 0 means the pipeline succeeded, 1 means it failed.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .application.services import (
    CsvProductionExtractor,
    EtlOrchestrator,
    ProductionLoader,
    ProductionTransformer,
)
from .infrastructure.repositories import DuckDBProductionRepository
from .shared.config.settings import Settings, get_settings
from .shared.responses import PipelineResult

logger = logging.getLogger("oilgas_etl")


def setup_logging(level: str = "INFO", logs_dir: str = "logs", log_filename: str = "oilgas_etl.log"):
    """Setup logging configuration"""
    Path(logs_dir).mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(Path(logs_dir) / log_filename, mode="a")
        ],
        force=True
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Oil & Gas production data ETL")
    parser.add_argument("--input-dir", type=Path, help="Directory scanned for CSV files")
    parser.add_argument("--processed-dir", type=Path, help="Destination for successfully read files")
    parser.add_argument("--error-dir", type=Path, help="Destination for unreadable files")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--database-mode", dest="use_database_mode", action="store_true", default=None,
                      help="Persist records to the DuckDB store")
    mode.add_argument("--in-memory", dest="use_database_mode", action="store_false",
                      help="Only compute in-memory statistics")
    parser.add_argument("--database-path", help="DuckDB database file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line options take precedence over environment settings."""
    overrides = {
        "INPUT_PATH": args.input_dir,
        "PROCESSED_PATH": args.processed_dir,
        "ERROR_PATH": args.error_dir,
        "USE_DATABASE_MODE": args.use_database_mode,
        "DATABASE_PATH": args.database_path,
        "LOG_LEVEL": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def build_orchestrator(settings: Settings) -> EtlOrchestrator:
    """Wire the pipeline components from settings."""
    use_database_mode = settings.database_mode_enabled
    if settings.USE_DATABASE_MODE and not use_database_mode:
        logger.warning("No database path configured, running in file-only mode")

    repository = DuckDBProductionRepository(settings.DATABASE_PATH) if use_database_mode else None
    extractor = CsvProductionExtractor(
        input_dir=settings.INPUT_PATH,
        processed_dir=settings.PROCESSED_PATH,
        error_dir=settings.ERROR_PATH,
        file_pattern=settings.FILE_PATTERN,
        separator=settings.CSV_SEPARATOR
    )
    return EtlOrchestrator(
        extractor=extractor,
        transformer=ProductionTransformer(),
        loader=ProductionLoader(repository),
        repository=repository,
        use_database_mode=use_database_mode
    )


def log_business_metrics(result: PipelineResult, settings: Settings) -> None:
    logger.info("=== Business Impact Metrics ===")
    stats = result.summary_stats

    if "total_oil_production" in stats:
        total_oil = float(stats["total_oil_production"])
        total_gas = float(stats.get("total_gas_production", 0.0))
        avg_ratio = float(stats.get("avg_oil_gas_ratio", 0.0))
        logger.info(f"Total Oil Production: {total_oil:,.0f} barrels")
        logger.info(f"Total Gas Production: {total_gas:,.0f} MCF")
        logger.info(f"Average Oil/Gas Ratio: {avg_ratio:,.2f}")

        oil_value = total_oil * settings.OIL_PRICE_PER_BARREL
        gas_value = total_gas * settings.GAS_PRICE_PER_MCF
        logger.info("Estimated Production Value:")
        logger.info(f"- Oil Value: ${oil_value:,.0f}")
        logger.info(f"- Gas Value: ${gas_value:,.0f}")
        logger.info(f"- Total Estimated Value: ${oil_value + gas_value:,.0f}")

    if "active_wells" in stats:
        logger.info("Well Status Summary:")
        logger.info(f"- Active Wells: {stats['active_wells']}")
        logger.info(f"- Shutdown Wells: {stats.get('shutdown_wells', 0)}")
        logger.info(f"- Maintenance Wells: {stats.get('maintenance_wells', 0)}")

    seconds = result.execution_time_ms / 1000
    logger.info("Data Quality Metrics:")
    logger.info(f"- Success Rate: {result.success_rate:.2%}")
    logger.info(f"- Processing Speed: {result.records_extracted / max(seconds, 1):,.0f} records/second")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    try:
        args = parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors and 0 for --help
        return 0 if e.code in (0, None) else 1

    try:
        settings = apply_overrides(get_settings(), args)
        setup_logging(settings.LOG_LEVEL, settings.LOGS_DIR_NAME, settings.LOG_FILENAME)

        logger.info("=== Oil & Gas Production Data ETL Pipeline ===")
        logger.info("Configuration loaded:")
        logger.info(f"- Input Path: {settings.INPUT_PATH}")
        logger.info(f"- Processed Path: {settings.PROCESSED_PATH}")
        logger.info(f"- Error Path: {settings.ERROR_PATH}")
        logger.info(f"- Database Mode: {settings.USE_DATABASE_MODE}")

        orchestrator = build_orchestrator(settings)
        result = asyncio.run(orchestrator.run())

        if result.success:
            logger.info("ETL Pipeline completed successfully!")
            log_business_metrics(result, settings)
            return 0

        logger.error(f"ETL Pipeline failed: {result.error_message}")
        return 1
    except Exception as e:
        logger.critical(f"Application terminated unexpectedly: {e}", exc_info=True)
        return 1
    finally:
        logger.info("ETL Application shutting down...")


if __name__ == "__main__":
    sys.exit(main())
