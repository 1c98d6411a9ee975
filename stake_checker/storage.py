"""
Storage keys and account identifiers for Substrate state queries.

A plain storage value lives under ``twox_128(module) + twox_128(field)``. Map
entries keyed by an account use the Blake2_128Concat hasher, which appends
``blake2_128(account_id) + account_id``.
"""

from hashlib import blake2b
from typing import Optional

import xxhash
from scalecodec.utils.ss58 import ss58_decode, ss58_encode

from stake_checker.exceptions import InvalidAccountIdentifierError

ACCOUNT_ID_LENGTH = 32


def twox_128(data: bytes) -> bytes:
    """Two xxHash64 rounds (seeds 0 and 1), little-endian, concatenated."""
    return b"".join(
        xxhash.xxh64_intdigest(data, seed=seed).to_bytes(8, "little") for seed in (0, 1)
    )


def blake2_128(data: bytes) -> bytes:
    return blake2b(data, digest_size=16).digest()


def decode_account_id(address: str, ss58_format: Optional[int] = None) -> bytes:
    """
    Decode an SS58 address into its 32 byte account id.

    Args:
        address: Checksummed SS58 string
        ss58_format: If given, the address prefix must match it

    Raises:
        InvalidAccountIdentifierError: On a bad checksum, prefix, length or alphabet
    """
    if not isinstance(address, str) or not address or address.startswith("0x"):
        raise InvalidAccountIdentifierError(f"Not an SS58 address: {address!r}")
    try:
        account_hex = ss58_decode(address, valid_ss58_format=ss58_format)
    except (ValueError, IndexError) as e:
        raise InvalidAccountIdentifierError(f"Invalid SS58 address {address!r}: {e}")

    account_id = bytes.fromhex(account_hex)
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise InvalidAccountIdentifierError(
            f"Address {address!r} holds {len(account_id)} bytes, expected {ACCOUNT_ID_LENGTH}"
        )
    return account_id


def encode_account_id(account_id: bytes, ss58_format: int = 0) -> str:
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise InvalidAccountIdentifierError(
            f"Account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(account_id)}"
        )
    return ss58_encode(account_id, ss58_format=ss58_format)


def validate_address(address: str, ss58_format: int = 0) -> str:
    """Require ``address`` to decode and re-encode to itself under ``ss58_format``."""
    account_id = decode_account_id(address)
    if encode_account_id(account_id, ss58_format) != address:
        raise InvalidAccountIdentifierError(
            f"Address {address!r} is not an SS58 address for format {ss58_format}"
        )
    return address


def build_storage_key(module_name: str, field_name: str, account_id: Optional[bytes] = None) -> bytes:
    """
    Build the raw key for ``module_name.field_name``, optionally for one account.

    Args:
        module_name: Pallet name, e.g. ``System``
        field_name: Storage item name, e.g. ``Account``
        account_id: 32 byte account id for map storage items

    Returns:
        bytes: 32 bytes for plain values, 80 bytes for account-keyed entries
    """
    key = twox_128(module_name.encode()) + twox_128(field_name.encode())
    if account_id is not None:
        if len(account_id) != ACCOUNT_ID_LENGTH:
            raise InvalidAccountIdentifierError(
                f"Account id must be {ACCOUNT_ID_LENGTH} bytes, got {len(account_id)}"
            )
        key += blake2_128(account_id) + account_id
    return key


def storage_key_hex(key: bytes) -> str:
    return "0x" + key.hex()
