"""
SCALE decoding for the storage values this tool knows how to read.

Values are decoded with scalecodec against a small type registry holding the
``System.Account`` layout. Bytes left over after a value are ignored.
"""

from dataclasses import dataclass
from typing import Any, Union

from scalecodec.base import RuntimeConfigurationObject, ScaleBytes
from scalecodec.exceptions import RemainingScaleBytesNotEmptyException

from stake_checker.exceptions import TruncatedInputError
from stake_checker.formatting import format_balance

ACCOUNT_TYPES = {
    "types": {
        "StakeCheckerAccountData": {
            "type": "struct",
            "type_mapping": [
                ["free", "u128"],
                ["reserved", "u128"],
                ["misc_frozen", "u128"],
                ["fee_frozen", "u128"],
            ],
        },
        "StakeCheckerAccountInfo": {
            "type": "struct",
            "type_mapping": [
                ["nonce", "u32"],
                ["consumers", "u32"],
                ["providers", "u32"],
                ["sufficients", "u32"],
                ["data", "StakeCheckerAccountData"],
            ],
        },
    }
}

_runtime_config = RuntimeConfigurationObject()
_runtime_config.update_type_registry(ACCOUNT_TYPES)


def decode_scale(type_string: str, data: bytes) -> Any:
    """
    Decode ``data`` as ``type_string`` and return the plain value.

    Raises:
        TruncatedInputError: If ``data`` ends before the value does
    """
    scale_object = _runtime_config.create_scale_object(type_string, data=ScaleBytes(bytearray(data)))
    try:
        return scale_object.decode(check_remaining=False)
    except RemainingScaleBytesNotEmptyException as e:
        raise TruncatedInputError(f"Not enough bytes to decode {type_string}, got {len(data)}: {e}")


def decode_u128(data: bytes) -> int:
    """Decode the first 16 bytes of ``data``; trailing bytes are ignored."""
    return decode_scale("u128", data)


@dataclass(frozen=True)
class AccountData:
    """Balances of an account, in the smallest token unit."""
    free: int
    reserved: int
    misc_frozen: int
    fee_frozen: int


@dataclass(frozen=True)
class AccountInfo:
    """``System.Account`` entry: reference counters plus balances."""
    nonce: int
    consumers: int
    providers: int
    sufficients: int
    data: AccountData

    def describe(self, decimals: int, symbol: str) -> str:
        return (
            f"Nonce: {self.nonce}, Consumers: {self.consumers}, "
            f"Providers: {self.providers}, Sufficients: {self.sufficients}, "
            f"{self.data_description(decimals, symbol)}"
        )

    def data_description(self, decimals: int, symbol: str) -> str:
        return (
            f"Free: {format_balance(self.data.free, decimals)} {symbol}, "
            f"Reserved: {format_balance(self.data.reserved, decimals)} {symbol}, "
            f"Misc Frozen: {format_balance(self.data.misc_frozen, decimals)} {symbol}, "
            f"Fee Frozen: {format_balance(self.data.fee_frozen, decimals)} {symbol}"
        )


def decode_account_info(data: bytes) -> AccountInfo:
    """
    Decode a ``System.Account`` value.

    Layout: nonce, consumers, providers, sufficients as u32, then free,
    reserved, misc_frozen, fee_frozen as u128.

    Raises:
        TruncatedInputError: If fewer than 80 bytes are given
    """
    value = decode_scale("StakeCheckerAccountInfo", data)
    counters = {name: value[name] for name in ("nonce", "consumers", "providers", "sufficients")}
    return AccountInfo(**counters, data=AccountData(**value["data"]))


@dataclass(frozen=True)
class TotalIssuance:
    """``Balances.TotalIssuance`` value."""
    amount: int

    def describe(self, decimals: int, symbol: str) -> str:
        return f"{format_balance(self.amount, decimals)} {symbol}"


@dataclass(frozen=True)
class RawStorage:
    """A value under a (module, field) pair with no known decoder."""
    data: bytes

    def describe(self, decimals: int, symbol: str) -> str:
        return "0x" + self.data.hex()


StorageValue = Union[TotalIssuance, AccountInfo, RawStorage]


def decode_storage_value(module_name: str, field_name: str, data: bytes) -> StorageValue:
    """Decode ``data`` for the storage items this tool knows, else keep the raw bytes."""
    if (module_name, field_name) == ("Balances", "TotalIssuance"):
        return TotalIssuance(decode_u128(data))
    if (module_name, field_name) == ("System", "Account"):
        return decode_account_info(data)
    return RawStorage(data)
