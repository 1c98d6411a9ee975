"""Unit tests for the node RPC and SubQuery clients.

These tests verify the request envelopes and response handling without
making HTTP requests.
"""
import pytest
from datetime import datetime
from unittest.mock import Mock, patch

import requests

from stake_checker.clients import NodeRPCClient, RecordSource, SubQueryClient
from stake_checker.exceptions import (
    MalformedTimestampError,
    MetadataDecodeError,
    NoDataFoundError,
    RPCError,
    SubQueryError,
)
from stake_checker.models import Reward, StakeChange
from tests.fixtures import (
    EMPTY_METADATA_V13_HEX,
    STAKE_CHANGES_BODY,
    STAKING_REWARDS_BODY,
    TOTAL_ISSUANCE_HEX,
    mock_response,
    rpc_body,
)


@pytest.fixture
def mock_rpc_post():
    """Mock requests.post in the RPC client module."""
    with patch('stake_checker.clients.rpc.requests.post') as mock_post:
        yield mock_post


@pytest.fixture
def mock_subquery_post():
    """Mock requests.post in the SubQuery client module."""
    with patch('stake_checker.clients.subquery.requests.post') as mock_post:
        yield mock_post


# NodeRPCClient

def test_rpc_envelope(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body({"tokenDecimals": 10}))
    client = NodeRPCClient("http://rpc.test")

    assert client.system_properties() == {"tokenDecimals": 10}
    mock_rpc_post.assert_called_once_with(
        "http://rpc.test",
        headers={"Content-Type": "application/json"},
        json={"id": 1, "jsonrpc": "2.0", "method": "system_properties", "params": []},
    )


def test_state_get_storage_sends_hex_key(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body(TOTAL_ISSUANCE_HEX))
    client = NodeRPCClient("http://rpc.test")

    data = client.state_get_storage(b"\x01\xab")

    assert data == bytes.fromhex(TOTAL_ISSUANCE_HEX[2:])
    payload = mock_rpc_post.call_args.kwargs["json"]
    assert payload["method"] == "state_getStorage"
    assert payload["params"] == ["0x01ab"]


def test_state_get_storage_without_value(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body(None))

    with pytest.raises(NoDataFoundError):
        NodeRPCClient("http://rpc.test").state_get_storage(b"\x00")


def test_state_get_storage_malformed_hex(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body("0xzz"))

    with pytest.raises(RPCError, match="malformed hex"):
        NodeRPCClient("http://rpc.test").state_get_storage(b"\x00")


def test_state_get_metadata(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body(EMPTY_METADATA_V13_HEX))

    metadata = NodeRPCClient("http://rpc.test").state_get_metadata()

    assert metadata[1] == {"V13": {"modules": [], "extrinsic": {"version": 4, "signed_extensions": []}}}
    assert mock_rpc_post.call_args.kwargs["json"]["method"] == "state_getMetadata"


def test_state_get_metadata_without_value(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(rpc_body(None))

    with pytest.raises(NoDataFoundError):
        NodeRPCClient("http://rpc.test").state_get_metadata()


@pytest.mark.parametrize("result", ["0x6d657461", "0x6d6574610d", "0xnothex", "6d657461"])
def test_state_get_metadata_undecodable(mock_rpc_post, result):
    mock_rpc_post.return_value = mock_response(rpc_body(result))

    with pytest.raises(MetadataDecodeError):
        NodeRPCClient("http://rpc.test").state_get_metadata()


def test_rpc_error_member(mock_rpc_post):
    mock_rpc_post.return_value = mock_response(
        {"id": 1, "jsonrpc": "2.0", "error": {"code": -32601, "message": "Method not found"}}
    )

    with pytest.raises(RPCError, match="Method not found"):
        NodeRPCClient("http://rpc.test").rpc("nope")


def test_http_errors_propagate(mock_rpc_post):
    response = Mock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("500 Server Error")
    mock_rpc_post.return_value = response

    with pytest.raises(requests.exceptions.HTTPError):
        NodeRPCClient("http://rpc.test").rpc_methods()
    assert mock_rpc_post.call_count == 1


# SubQueryClient

def test_subquery_client_is_a_record_source():
    assert isinstance(SubQueryClient("http://subquery.test"), RecordSource)


def test_get_staking_rewards(mock_subquery_post):
    mock_subquery_post.return_value = mock_response(STAKING_REWARDS_BODY)
    client = SubQueryClient("http://subquery.test")

    rewards = client.get_staking_rewards("dummyAddress")

    assert rewards[0] == Reward(date=datetime(2015, 6, 10, 8, 7, 6, 11000), balance=9)
    assert rewards[-1] == Reward(date=datetime(2016, 7, 8, 9, 10, 11), balance=11)
    query = mock_subquery_post.call_args.kwargs["json"]["query"]
    assert 'stakingRewards (last: 100, orderBy: DATE_ASC' in query
    assert 'accountId : {equalTo : "dummyAddress"}' in query
    assert 'nodes { balance date }' in query


def test_get_stake_changes(mock_subquery_post):
    mock_subquery_post.return_value = mock_response(STAKE_CHANGES_BODY)
    client = SubQueryClient("http://subquery.test")

    changes = client.get_stake_changes("dummyAddress")

    assert [c.accumulated_amount for c in changes] == [1000000000000, 2000000000000, 3000000000000]
    assert changes[0] == StakeChange(timestamp=datetime(2022, 9, 19, 17, 53, 20), accumulated_amount=1000000000000)
    query = mock_subquery_post.call_args.kwargs["json"]["query"]
    assert 'stakeChanges (last: 100, orderBy: TIMESTAMP_ASC' in query
    assert 'address : {equalTo : "dummyAddress"}' in query


@pytest.mark.parametrize("body", [{"data": {}}, {"data": None}, {"data": {"stakingRewards": {"nodes": None}}}])
def test_missing_nodes_means_no_rewards(mock_subquery_post, body):
    mock_subquery_post.return_value = mock_response(body)
    assert SubQueryClient("http://subquery.test").get_staking_rewards("dummyAddress") == []


def test_graphql_errors(mock_subquery_post):
    mock_subquery_post.return_value = mock_response({"errors": [{"message": "Cannot query field"}]})

    with pytest.raises(SubQueryError, match="Cannot query field"):
        SubQueryClient("http://subquery.test").get_stake_changes("dummyAddress")


def test_malformed_node_fails_the_fetch(mock_subquery_post):
    mock_subquery_post.return_value = mock_response(
        {"data": {"stakingRewards": {"nodes": [{"balance": "1", "date": "soon"}]}}}
    )

    with pytest.raises(MalformedTimestampError):
        SubQueryClient("http://subquery.test").get_staking_rewards("dummyAddress")
