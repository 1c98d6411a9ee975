"""Shared test fixtures for stake checker tests."""
# Mock config fixtures and constants
from .mock_config import (
    mock_settings,
    properties_file,
    settings_environ,
    ALICE_ACCOUNT_ID,
    ALICE_GENERIC_SS58,
    TEST_POLKADOT_ADDR,
    TEST_RPC_ENDPOINT,
    TEST_SUBQUERY_ENDPOINT_REWARDS,
    TEST_SUBQUERY_ENDPOINT_STAKE_CHANGES,
    TEST_TOKEN_DECIMALS,
    TEST_PROPERTIES,
)

# Canned HTTP answers
from .mock_responses import (
    mock_response,
    rpc_body,
    encode_account_info,
    TOTAL_ISSUANCE_HEX,
    TOTAL_ISSUANCE,
    EMPTY_METADATA_V13_HEX,
    STAKING_REWARDS_BODY,
    STAKE_CHANGES_BODY,
)

__all__ = [
    # Fixtures
    'mock_settings',
    'properties_file',
    'settings_environ',
    # Helpers
    'mock_response',
    'rpc_body',
    'encode_account_info',
    # Constants
    'ALICE_ACCOUNT_ID',
    'ALICE_GENERIC_SS58',
    'TEST_POLKADOT_ADDR',
    'TEST_RPC_ENDPOINT',
    'TEST_SUBQUERY_ENDPOINT_REWARDS',
    'TEST_SUBQUERY_ENDPOINT_STAKE_CHANGES',
    'TEST_TOKEN_DECIMALS',
    'TEST_PROPERTIES',
    'TOTAL_ISSUANCE_HEX',
    'TOTAL_ISSUANCE',
    'EMPTY_METADATA_V13_HEX',
    'STAKING_REWARDS_BODY',
    'STAKE_CHANGES_BODY',
]
