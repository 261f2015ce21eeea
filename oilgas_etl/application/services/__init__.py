from .extraction_service import CsvProductionExtractor, FileExtractionResult, RowOutcome
from .transformation_service import ProductionTransformer
from .load_service import ProductionLoader
from .etl_orchestrator import EtlOrchestrator

__all__ = [
    "CsvProductionExtractor",
    "FileExtractionResult",
    "RowOutcome",
    "ProductionTransformer",
    "ProductionLoader",
    "EtlOrchestrator",
]
