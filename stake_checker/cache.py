"""
Local files kept between runs: CSV record caches and the chain properties JSON.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Type, TypeVar, Union

from stake_checker.models import TimestampedRecord

R = TypeVar("R", bound=TimestampedRecord)
PathLike = Union[str, Path]


def load_records(path: PathLike, record_type: Type[R]) -> List[R]:
    """
    Read a headerless two-column CSV cache into records.

    A missing file is an empty cache. Blank lines are skipped; the first
    malformed row stops the read with that row's error.
    """
    path = Path(path)
    if not path.exists():
        return []

    records = []
    with open(path, newline="") as f:
        for row in csv.reader(f):
            if not row:
                continue
            records.append(record_type.from_csv_row(row))
    return records


def append_records(path: PathLike, records: Iterable[TimestampedRecord]) -> int:
    """Append records to a CSV cache, creating it if needed. Returns the number written."""
    count = 0
    with open(path, "a", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        for record in records:
            writer.writerow(record.to_csv_row())
            count += 1
    return count


def load_properties(path: PathLike) -> Dict[str, Any]:
    with open(path) as f:
        return json.load(f)


def save_properties(path: PathLike, properties: Dict[str, Any]):
    with open(path, "w") as f:
        json.dump(properties, f, indent=2)


def token_decimals(properties: Dict[str, Any]) -> int:
    """``tokenDecimals`` from a system_properties document; anything but an unsigned int reads as 0."""
    decimals = properties.get("tokenDecimals")
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        return 0
    return decimals
