from typing import Any, Dict, List, Type, TypeVar

import requests

from stake_checker.clients.source import RecordSource
from stake_checker.exceptions import SubQueryError
from stake_checker.models import Reward, StakeChange, TimestampedRecord

R = TypeVar("R", bound=TimestampedRecord)

FETCH_LIMIT = 100

STAKING_REWARDS_QUERY = (
    '{{ stakingRewards (last: {limit}, orderBy: DATE_ASC, '
    'filter: {{accountId : {{equalTo : "{address}"}}}}) '
    '{{ nodes {{ balance date }} }} }}'
)

STAKE_CHANGES_QUERY = (
    '{{ stakeChanges (last: {limit}, orderBy: TIMESTAMP_ASC, '
    'filter: {{address : {{equalTo : "{address}"}}}}) '
    '{{ nodes {{ accumulatedAmount timestamp }} }} }}'
)


class SubQueryClient(RecordSource):
    """Client for a SubQuery project's GraphQL endpoint."""

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self.headers = {"Content-Type": "application/json"}

    def query(self, graphql: str) -> Dict[str, Any]:
        """
        Run one GraphQL query and return its ``data`` member.

        Raises:
            requests.HTTPError: On a non-2xx answer
            SubQueryError: If the answer carries GraphQL errors
        """
        response = requests.post(self.endpoint, headers=self.headers, json={"query": graphql})
        response.raise_for_status()
        answer = response.json()

        if answer.get("errors"):
            messages = "; ".join(str(e.get("message", e)) for e in answer["errors"])
            raise SubQueryError(f"SubQuery error from {self.endpoint}: {messages}")
        return answer.get("data") or {}

    def _fetch_nodes(self, graphql: str, collection: str, record_type: Type[R]) -> List[R]:
        data = self.query(graphql)
        nodes = (data.get(collection) or {}).get("nodes")
        if not isinstance(nodes, list):
            return []
        return [record_type.from_json(node) for node in nodes]

    def get_staking_rewards(self, address: str) -> List[Reward]:
        graphql = STAKING_REWARDS_QUERY.format(limit=FETCH_LIMIT, address=address)
        return self._fetch_nodes(graphql, "stakingRewards", Reward)

    def get_stake_changes(self, address: str) -> List[StakeChange]:
        graphql = STAKE_CHANGES_QUERY.format(limit=FETCH_LIMIT, address=address)
        return self._fetch_nodes(graphql, "stakeChanges", StakeChange)
