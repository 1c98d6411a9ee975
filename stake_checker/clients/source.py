"""
Sources of time-ordered staking records.
All sources implement the RecordSource interface for easy swapping.
"""

from abc import ABC, abstractmethod
from typing import List

from stake_checker.models import Reward, StakeChange


class RecordSource(ABC):
    """Interface for indexers serving staking history for an account."""

    @abstractmethod
    def get_staking_rewards(self, address: str) -> List[Reward]:
        """
        Fetch the latest staking rewards paid to an account.

        Args:
            address: SS58 address to query

        Returns:
            list: At most 100 rewards, ascending by date
        """
        pass

    @abstractmethod
    def get_stake_changes(self, address: str) -> List[StakeChange]:
        """
        Fetch the latest changes of an account's bonded stake.

        Args:
            address: SS58 address to query

        Returns:
            list: At most 100 stake changes, ascending by timestamp
        """
        pass
