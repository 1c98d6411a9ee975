from enum import Enum
from typing import List, Sequence, TypeVar

from stake_checker.models import TimestampedRecord

R = TypeVar("R", bound=TimestampedRecord)


class BoundaryPolicy(Enum):
    """What to do with the first fetched record at or after the last cached one."""
    SKIP_MATCH = "skip"  # Historical behaviour: the matching record is dropped
    INCLUDE_MATCH = "include"


def reconcile(
    cached: Sequence[R],
    fetched: Sequence[R],
    policy: BoundaryPolicy = BoundaryPolicy.SKIP_MATCH,
) -> List[R]:
    """
    Return the fetched records that are new relative to the cache.

    Both sequences are assumed to be ascending by timestamp. An empty cache
    means everything fetched is new. Otherwise the cut happens at the first
    fetched record whose timestamp is >= the last cached timestamp; with
    SKIP_MATCH only the records after it are returned, with INCLUDE_MATCH it
    is returned too. When no fetched record reaches the last cached timestamp
    the result is empty.

    Args:
        cached: Records already known locally
        fetched: Records just retrieved from the indexer
        policy: Whether the boundary record itself counts as new

    Returns:
        list: The new records, in fetched order
    """
    if not cached:
        return list(fetched)

    last_known = cached[-1].timestamp
    for index, record in enumerate(fetched):
        if record.timestamp >= last_known:
            start = index + 1 if policy is BoundaryPolicy.SKIP_MATCH else index
            return list(fetched[start:])
    return []
