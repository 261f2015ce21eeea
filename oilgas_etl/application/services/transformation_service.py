import logging
from typing import Iterable, List

from ...domain.entities.production_record import CleanRecord, RawRecord
from ...domain.validation import validation_errors
from ...shared.utils.timing_decorator import timed

logger = logging.getLogger(__name__)

SHUTDOWN_STATUS = "Shutdown"
VOLUME_FIELDS = ("oil_production", "gas_production", "water_production")


class ProductionTransformer:
    """
    Applies business normalization rules and promotes valid records.

    Rules, in order:
        - status "inactive" (any case) becomes "Shutdown"
        - negative oil/gas/water volumes are clamped to zero
    The normalized record is re-validated; failures are dropped and logged.
    """

    def normalize(self, record: RawRecord) -> RawRecord:
        updates = {}
        if record.status.strip().lower() == "inactive":
            updates["status"] = SHUTDOWN_STATUS
        for field in VOLUME_FIELDS:
            if getattr(record, field) < 0:
                updates[field] = 0.0
        return record.model_copy(update=updates) if updates else record

    @timed
    def transform(self, records: Iterable[RawRecord]) -> List[CleanRecord]:
        clean_records: List[CleanRecord] = []
        rejected_count = 0

        for record in records:
            normalized = self.normalize(record)
            errors = validation_errors(normalized)
            if errors:
                rejected_count += 1
                logger.warning(
                    f"Rejected invalid record for well {normalized.well_id!r} on "
                    f"{normalized.production_date}: {', '.join(errors)}"
                )
                continue
            clean_records.append(CleanRecord.from_raw(normalized))

        logger.info(
            f"Data transformation completed: {len(clean_records)} valid, {rejected_count} rejected"
        )
        return clean_records
