"""Index construction: turning raw records into comparable entries."""

import dataclasses
import json
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import structlog
from pydantic import BaseModel

from ..models.options import SearchOptions
from .errors import AimaiError, IndexBuildError
from .normalizer import TextNormalizer
from .reading import ReadingProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IndexedRecord:
    """A record together with its normalized text and reading."""

    original: Any
    normalized_text: str
    normalized_reading: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original,
            "normalizedText": self.normalized_text,
            "normalizedReading": self.normalized_reading,
        }


def record_fields(record: Any) -> Optional[Mapping]:
    """Field mapping of a structured record, or None for scalars."""
    if isinstance(record, Mapping):
        return record
    if isinstance(record, BaseModel):
        return dict(record)
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return {field.name: getattr(record, field.name) for field in dataclasses.fields(record)}
    if hasattr(record, "__dict__"):
        return vars(record)
    return None


def resolve_key(record: Any, key: str) -> Any:
    """Look up a field selector; dots walk into nested records."""
    value = record
    for part in key.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def extract_text(record: Any, keys: Sequence[str] = ()) -> str:
    """
    Extract the searchable text of a record.

    Args:
        record: A string or a structured record
        keys: Field selectors; when empty every string field is used

    Returns:
        Space-joined string values (the record itself for strings)
    """
    if isinstance(record, str):
        return record

    if keys:
        values = [resolve_key(record, key) for key in keys]
    else:
        fields = record_fields(record)
        if fields is None:
            return "" if record is None else str(record)
        values = list(fields.values())

    return " ".join(value for value in values if isinstance(value, str))


def _jsonable(record: Any) -> Any:
    # Keys become strings so mixed int/str keys still sort
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        record = dataclasses.asdict(record)
    if isinstance(record, Mapping):
        return {str(key): _jsonable(value) for key, value in record.items()}
    if isinstance(record, (list, tuple)):
        return [_jsonable(value) for value in record]
    return record


def canonical_form(record: Any) -> str:
    """Key-order independent serialization used for exact-match checks."""
    if isinstance(record, str):
        return record
    return json.dumps(
        _jsonable(record),
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )


class IndexBuilder:
    """Builds indexed records one at a time."""

    def __init__(self, normalizer: Optional[TextNormalizer] = None) -> None:
        self.normalizer = normalizer or TextNormalizer()

    async def build_record(
        self,
        record: Any,
        options: SearchOptions,
        provider: ReadingProvider,
    ) -> IndexedRecord:
        """Normalize one record's text and reading."""
        text = extract_text(record, options.keys)
        normalization = options.normalization

        normalized_text = self.normalizer.normalize(text, normalization)
        reading = await provider.reading_of(text)
        normalized_reading = self.normalizer.normalize(reading, normalization)

        return IndexedRecord(
            original=record,
            normalized_text=normalized_text,
            normalized_reading=normalized_reading,
        )

    async def build(
        self,
        records: Sequence[Any],
        options: SearchOptions,
        provider: ReadingProvider,
    ) -> List[IndexedRecord]:
        """
        Build the index for a record collection.

        Records are processed strictly in sequence so the reading provider
        never sees more than one request at a time. Any failure aborts the
        whole build.

        Args:
            records: Raw records
            options: Engine options (keys and normalization switches)
            provider: Reading provider

        Returns:
            One indexed record per input record, in input order
        """
        start_time = time.time()
        logger.info("Index build started", total_records=len(records))

        index: List[IndexedRecord] = []
        for position, record in enumerate(records):
            try:
                index.append(await self.build_record(record, options, provider))
            except AimaiError:
                logger.error("Index build aborted", position=position)
                raise
            except Exception as e:
                logger.error("Index build aborted", position=position, error=str(e))
                raise IndexBuildError(f"Failed to index record {position}: {e}", position) from e

        logger.info(
            "Index build completed",
            total_records=len(index),
            execution_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return index
