"""Reading and writing indexes as JSON."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, List, Sequence, Union

from .errors import IndexFormatError
from .index import IndexedRecord

INDEX_FIELDS = ("original", "normalizedText", "normalizedReading")

PathLike = Union[str, Path]


def is_indexed(data: Any) -> bool:
    """Whether data looks like a serialized index (judged by its first element)."""
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence) or not data:
        return False
    first = data[0]
    if isinstance(first, IndexedRecord):
        return True
    return isinstance(first, Mapping) and all(field in first for field in INDEX_FIELDS)


def parse_index(data: Any) -> List[IndexedRecord]:
    """
    Convert serialized index entries into indexed records.

    Args:
        data: Sequence of IndexedRecord or {original, normalizedText, normalizedReading} mappings

    Returns:
        Indexed records in input order

    Raises:
        IndexFormatError: If the data or any entry has the wrong shape
    """
    if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, Sequence):
        raise IndexFormatError(f"Index must be a list, got {type(data).__name__}")

    index: List[IndexedRecord] = []
    for position, entry in enumerate(data):
        if isinstance(entry, IndexedRecord):
            index.append(entry)
            continue

        if not isinstance(entry, Mapping) or not all(field in entry for field in INDEX_FIELDS):
            raise IndexFormatError(f"Index entry {position} is missing one of {INDEX_FIELDS}")

        text = entry["normalizedText"]
        reading = entry["normalizedReading"]
        if not isinstance(text, str) or not isinstance(reading, str):
            raise IndexFormatError(f"Index entry {position} has non-string normalized fields")

        index.append(IndexedRecord(entry["original"], text, reading))

    return index


def dump_index(index: Iterable[IndexedRecord]) -> List[dict]:
    return [record.to_dict() for record in index]


def load_json(path: PathLike) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_index(index: Iterable[IndexedRecord], path: PathLike) -> None:
    """Write an index to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dump_index(index), f, ensure_ascii=False, indent=2)


def load_index(path: PathLike) -> List[IndexedRecord]:
    """Read an index file, raising IndexFormatError on a malformed one."""
    return parse_index(load_json(path))
