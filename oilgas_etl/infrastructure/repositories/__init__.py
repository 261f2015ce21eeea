from .duckdb_production_repository import DuckDBProductionRepository

__all__ = ["DuckDBProductionRepository"]
