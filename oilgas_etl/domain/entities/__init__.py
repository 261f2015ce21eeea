from .production_record import RawRecord, CleanRecord

__all__ = ["RawRecord", "CleanRecord"]
