from .repository import ProductionRepository

__all__ = ["ProductionRepository"]
