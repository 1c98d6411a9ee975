from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from stake_checker.cache import (
    append_records,
    load_properties,
    load_records,
    save_properties,
    token_decimals,
)
from stake_checker.clients.rpc import NodeRPCClient
from stake_checker.clients.source import RecordSource
from stake_checker.clients.subquery import SubQueryClient
from stake_checker.config import StakeCheckerSettings
from stake_checker.models import Reward, StakeChange, TimestampedRecord
from stake_checker.reconcile import BoundaryPolicy, reconcile
from stake_checker.scale import AccountInfo, StorageValue, decode_account_info, decode_storage_value, decode_u128
from stake_checker.storage import build_storage_key, decode_account_id


class StakeChecker:
    """
    Reports balances, issuance and staking history for one Polkadot account.

    Rewards and stake changes are fetched from SubQuery and reconciled
    against the CSV caches named in the settings, so only records newer than
    the last cached one are reported.
    """

    def __init__(
        self,
        config: StakeCheckerSettings,
        rpc_client: Optional[NodeRPCClient] = None,
        rewards_source: Optional[RecordSource] = None,
        stake_changes_source: Optional[RecordSource] = None,
    ):
        self.config = config
        self.address = config.polkadot_addr
        self.rpc_client = rpc_client or NodeRPCClient(config.rpc_endpoint)
        self.rewards_source = rewards_source or SubQueryClient(config.subquery_endpoint_rewards)
        self.stake_changes_source = stake_changes_source or SubQueryClient(config.subquery_endpoint_stake_changes)
        self._properties: Optional[Dict[str, Any]] = None

    # Chain properties

    def ensure_properties_file(self) -> Path:
        """Fetch system_properties into the properties file unless it already exists."""
        path = Path(self.config.polkadot_properties_file)
        if not path.exists():
            print(f"Couldn't find {path}. Creating and populating it.")
            save_properties(path, self.rpc_client.system_properties())
        return path

    @property
    def properties(self) -> Dict[str, Any]:
        if self._properties is None:
            self._properties = load_properties(self.ensure_properties_file())
        return self._properties

    def token_decimals(self) -> int:
        return token_decimals(self.properties)

    def token_symbol(self) -> str:
        symbol = self.properties.get("tokenSymbol")
        return symbol if isinstance(symbol, str) and symbol else self.config.token_symbol

    # Staking history

    def get_staking_rewards(self, policy: BoundaryPolicy = BoundaryPolicy.SKIP_MATCH) -> List[Reward]:
        """Rewards paid since the last one in the known rewards file."""
        known = load_records(self.config.known_rewards_file, Reward)
        latest = self.rewards_source.get_staking_rewards(self.address)
        return reconcile(known, latest, policy)

    def get_stake_changes(self, policy: BoundaryPolicy = BoundaryPolicy.SKIP_MATCH) -> List[StakeChange]:
        """Stake changes since the last one in the known stake changes file."""
        known = load_records(self.config.known_stake_changes_file, StakeChange)
        latest = self.stake_changes_source.get_stake_changes(self.address)
        return reconcile(known, latest, policy)

    @staticmethod
    def append_to_cache(path: str, records: Iterable[TimestampedRecord]) -> int:
        written = append_records(path, records)
        print(f"✓ Appended {written} records to {path}", flush=True)
        return written

    # Chain state

    def get_storage(self, module_name: str, field_name: str, address: Optional[str] = None) -> bytes:
        account_id = decode_account_id(address) if address is not None else None
        key = build_storage_key(module_name, field_name, account_id)
        return self.rpc_client.state_get_storage(key)

    def get_decoded_storage(self, module_name: str, field_name: str, address: Optional[str] = None) -> StorageValue:
        data = self.get_storage(module_name, field_name, address)
        return decode_storage_value(module_name, field_name, data)

    def get_total_issuance(self) -> int:
        return decode_u128(self.get_storage("Balances", "TotalIssuance"))

    def get_account_info(self) -> AccountInfo:
        return decode_account_info(self.get_storage("System", "Account", self.address))
