import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, ClassVar, Dict, List, Sequence, Tuple

from stake_checker.exceptions import (
    BalanceOverflowError,
    MalformedRecordError,
    MalformedTimestampError,
    NonIntegerValueError,
)

U64_MAX = 2 ** 64 - 1
UNIX_EPOCH = datetime(1970, 1, 1)
ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"
ISO_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(?:Z|[+-]\d{2}:?\d{2})?"
)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamp as served by SubQuery or stored in a cache file.

    Two forms are accepted:
    - ISO-like ``2022-04-01T18:27:12.01``; the fraction is padded to at least
      milliseconds and may be missing altogether. A ``Z`` or ``+HH:MM`` suffix
      is dropped, the wall-clock time is kept as is and the result stays naive
    - Unix epoch seconds as a digit string, e.g. ``"1663610000"``

    Raises:
        MalformedTimestampError: If neither form parses
    """
    if not isinstance(value, str):
        raise MalformedTimestampError(f"Timestamp must be a string, got {value!r}")

    if "T" in value:
        match = ISO_PATTERN.fullmatch(value)
        if match is None:
            raise MalformedTimestampError(f"Malformed timestamp {value!r}")
        whole, fraction = match.groups()
        try:
            parsed = datetime.strptime(whole, ISO_FORMAT)
        except ValueError as e:
            raise MalformedTimestampError(f"Malformed timestamp {value!r}: {e}")
        return parsed.replace(microsecond=int((fraction or "").ljust(6, "0")[:6]))

    if value.isascii() and value.isdigit():
        try:
            return UNIX_EPOCH + timedelta(seconds=int(value))
        except OverflowError as e:
            raise MalformedTimestampError(f"Epoch timestamp {value!r} out of range: {e}")

    raise MalformedTimestampError(f"Malformed timestamp {value!r}")


def format_timestamp(value: datetime) -> str:
    """ISO form with millisecond precision, the inverse of parse_timestamp."""
    return value.isoformat(timespec="milliseconds")


def parse_balance(value: Any) -> int:
    """
    Parse a balance that may arrive as a JSON number or a quoted digit string.

    Raises:
        NonIntegerValueError: If the value is not an unsigned integer
        BalanceOverflowError: If the value does not fit in 64 bits
    """
    if isinstance(value, bool):
        raise NonIntegerValueError(f"Expected an unsigned integer, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise NonIntegerValueError(f"Expected an unsigned integer, got {value!r}")
        amount = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        amount = int(value)
    else:
        raise NonIntegerValueError(f"Expected an unsigned integer, got {value!r}")

    if amount > U64_MAX:
        raise BalanceOverflowError(f"Balance {amount} does not fit in 64 bits")
    return amount


class TimestampedRecord:
    """
    Base for time-ordered records with a magnitude.

    Subclasses are dataclasses exposing ``timestamp`` and ``magnitude`` and
    naming their JSON fields in ``json_fields`` as (timestamp, magnitude).
    """

    json_fields: ClassVar[Tuple[str, str]]

    @classmethod
    def from_json(cls, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise MalformedRecordError(f"{cls.__name__} must be a JSON object, got {data!r}")
        timestamp_field, magnitude_field = cls.json_fields
        try:
            raw_timestamp = data[timestamp_field]
            raw_magnitude = data[magnitude_field]
        except KeyError as e:
            raise MalformedRecordError(f"{cls.__name__} is missing field {e}")
        return cls(parse_timestamp(raw_timestamp), parse_balance(raw_magnitude))

    @classmethod
    def from_csv_row(cls, row: Sequence[str]):
        if len(row) != 2:
            raise MalformedRecordError(f"Expected 2 fields per {cls.__name__} row, got {len(row)}: {row!r}")
        return cls(parse_timestamp(row[0].strip()), parse_balance(row[1].strip()))

    def to_csv_row(self) -> List[str]:
        return [format_timestamp(self.timestamp), str(self.magnitude)]

    def __str__(self) -> str:
        return ",".join(self.to_csv_row())


@dataclass(frozen=True)
class Reward(TimestampedRecord):
    """A staking reward payout."""
    date: datetime
    balance: int

    json_fields: ClassVar[Tuple[str, str]] = ("date", "balance")

    @property
    def timestamp(self) -> datetime:
        return self.date

    @property
    def magnitude(self) -> int:
        return self.balance


@dataclass(frozen=True)
class StakeChange(TimestampedRecord):
    """A change of bonded stake; ``accumulated_amount`` is the running total."""
    timestamp: datetime
    accumulated_amount: int

    json_fields: ClassVar[Tuple[str, str]] = ("timestamp", "accumulatedAmount")

    @property
    def magnitude(self) -> int:
        return self.accumulated_amount
