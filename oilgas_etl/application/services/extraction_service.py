"""
Extract stage: reads daily production CSV files and routes every file to the
processed or error directory.

Row and file failures are returned as explicit outcomes and counted; only a
failure to move a file anywhere is raised.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import polars as pl
from pydantic import ValidationError

from ...domain.entities.production_record import RawRecord
from ...domain.validation import validation_errors
from ...shared.exceptions import FileSystemException
from ...shared.utils.timing_decorator import timed

logger = logging.getLogger(__name__)

# Normalized CSV header -> RawRecord field
HEADER_FIELDS = {
    "wellid": "well_id",
    "productiondate": "production_date",
    "oilproduction": "oil_production",
    "gasproduction": "gas_production",
    "waterproduction": "water_production",
    "wellheadpressure": "wellhead_pressure",
    "temperature": "temperature",
    "status": "status",
    "comments": "comments",
}

NUMERIC_FIELDS = ("oil_production", "gas_production", "water_production", "wellhead_pressure", "temperature")


def normalize_header(name: str) -> str:
    """Case-, space- and underscore-insensitive header key"""
    return name.strip().lower().replace("_", "").replace(" ", "")


@dataclass
class RowOutcome:
    """Coercion result for a single CSV row: a record or an error, never both"""
    row_number: int
    record: Optional[RawRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass
class FileExtractionResult:
    """Outcome of processing one input file"""
    file_name: str
    records: List[RawRecord] = field(default_factory=list)
    skipped_rows: int = 0
    invalid_rows: int = 0
    error: Optional[str] = None
    destination: Optional[Path] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class CsvProductionExtractor:
    """Reads production CSV files from an input directory into RawRecords."""

    def __init__(
        self,
        input_dir: Union[str, Path],
        processed_dir: Union[str, Path],
        error_dir: Union[str, Path],
        file_pattern: str = "*.csv",
        separator: str = ","
    ):
        self.input_dir = Path(input_dir)
        self.processed_dir = Path(processed_dir)
        self.error_dir = Path(error_dir)
        self.file_pattern = file_pattern
        self.separator = separator

        for path in (self.input_dir, self.processed_dir, self.error_dir):
            path.mkdir(parents=True, exist_ok=True)

    def list_input_files(self, input_dir: Optional[Path] = None) -> List[Path]:
        directory = Path(input_dir) if input_dir is not None else self.input_dir
        return sorted(p for p in directory.glob(self.file_pattern) if p.is_file())

    @timed
    def extract_all(self, input_dir: Optional[Union[str, Path]] = None) -> List[RawRecord]:
        """
        Process every matching file in the input directory.

        Args:
            input_dir: Directory to scan; defaults to the configured input directory

        Returns:
            Valid RawRecords from all files, in file then row order
        """
        directory = Path(input_dir) if input_dir is not None else self.input_dir
        files = self.list_input_files(directory)
        if not files:
            logger.warning(f"No files matching {self.file_pattern} found in input directory: {directory}")
            return []

        all_records: List[RawRecord] = []
        failed_files = 0
        for path in files:
            logger.info(f"Processing file: {path.name}")
            result = self.process_file(path)
            all_records.extend(result.records)
            if not result.succeeded:
                failed_files += 1

        logger.info(
            f"Extraction completed: {len(all_records)} records from {len(files)} files "
            f"({failed_files} routed to error directory)"
        )
        return all_records

    def process_file(self, path: Path) -> FileExtractionResult:
        """Extract one file and move it to exactly one of processed/error."""
        result = FileExtractionResult(file_name=path.name)
        try:
            frame = self._read_frame(path)
        except (pl.exceptions.PolarsError, OSError) as e:
            logger.error(f"Error processing file {path.name}: {e}")
            result.error = str(e)
            result.destination = self._move(path, self.error_dir)
            return result

        for outcome in self._coerce_rows(frame):
            if not outcome.ok:
                result.skipped_rows += 1
                logger.warning(f"Error parsing row {outcome.row_number} of {path.name}: {outcome.error}")
                continue
            record = outcome.record
            errors = validation_errors(record)
            if errors:
                result.invalid_rows += 1
                logger.warning(
                    f"Invalid data row for well {record.well_id!r} on {record.production_date} "
                    f"in {path.name}: {', '.join(errors)}"
                )
                continue
            result.records.append(record)

        try:
            result.destination = self._move(path, self.processed_dir)
        except FileSystemException as e:
            logger.error(f"Could not move {path.name} to processed directory: {e.message}")
            result.records = []
            result.error = e.message
            result.destination = self._move(path, self.error_dir)
            return result

        logger.info(
            f"Moved {path.name} to processed folder "
            f"({len(result.records)} valid, {result.invalid_rows} invalid, {result.skipped_rows} unparseable)"
        )
        return result

    def _read_frame(self, path: Path) -> pl.DataFrame:
        """
        Read a file as all-string columns, tolerating ragged lines and empty files.

        A stray quote inside an unquoted cell makes the quoted read fail for the
        whole file; the file is then re-read with quoting disabled so the stray
        quote stays part of the cell text. Only a file that fails both reads
        raises.
        """
        try:
            return self._read_csv(path, quote_char='"')
        except pl.exceptions.PolarsError as e:
            logger.warning(f"Malformed quoting in {path.name}, re-reading without quote handling: {e}")
            return self._read_csv(path, quote_char=None)

    def _read_csv(self, path: Path, quote_char: Optional[str]) -> pl.DataFrame:
        return pl.read_csv(
            path,
            has_header=True,
            separator=self.separator,
            quote_char=quote_char,
            infer_schema=False,
            truncate_ragged_lines=True,
            raise_if_empty=False,
        )

    def _coerce_rows(self, frame: pl.DataFrame):
        columns = {}
        for column in frame.columns:
            field_name = HEADER_FIELDS.get(normalize_header(column))
            if field_name is not None and field_name not in columns.values():
                columns[column] = field_name

        # Row numbers are 1-based and count the header line
        for index, row in enumerate(frame.iter_rows(named=True), start=2):
            values = {field_name: row[column] for column, field_name in columns.items()}
            yield self._coerce_row(index, values)

    @staticmethod
    def _coerce_row(row_number: int, values: Dict[str, Any]) -> RowOutcome:
        data: Dict[str, Any] = {}
        for field_name in HEADER_FIELDS.values():
            value = values.get(field_name)
            if isinstance(value, str):
                value = value.strip()
            if value in (None, ""):
                if field_name in NUMERIC_FIELDS:
                    value = 0.0
                elif field_name == "status":
                    value = "Active"
                elif field_name == "well_id":
                    value = ""
                else:
                    value = None
            data[field_name] = value

        try:
            return RowOutcome(row_number=row_number, record=RawRecord.model_validate(data))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            return RowOutcome(row_number=row_number, error=problems)

    def _move(self, path: Path, destination_dir: Path) -> Path:
        """Atomically rename the file into destination_dir without overwriting."""
        target = destination_dir / path.name
        if target.exists():
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
            target = destination_dir / f"{path.stem}.{stamp}{path.suffix}"
        try:
            path.replace(target)
        except OSError as e:
            raise FileSystemException(
                message=f"Failed to move {path.name} to {destination_dir}: {e}",
                file_path=str(path),
                cause=e
            ) from e
        return target
