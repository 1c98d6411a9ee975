from typing import Any, Dict, Sequence

import requests
from scalecodec.base import RuntimeConfigurationObject, ScaleBytes
from scalecodec.exceptions import InvalidScaleTypeValueException, RemainingScaleBytesNotEmptyException
from scalecodec.type_registry import load_type_registry_preset

from stake_checker.exceptions import MetadataDecodeError, NoDataFoundError, RPCError
from stake_checker.storage import storage_key_hex


class NodeRPCClient:
    """Client for a Substrate node's JSON-RPC HTTP endpoint."""

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self.headers = {"Content-Type": "application/json"}

    def rpc(self, method: str, params: Sequence[Any] = ()) -> Any:
        """
        Call one JSON-RPC method and return its ``result``.

        Args:
            method: RPC method name, e.g. ``state_getStorage``
            params: Positional parameters

        Returns:
            The ``result`` member, which may be None

        Raises:
            requests.HTTPError: On a non-2xx answer
            RPCError: If the node answers with an ``error`` member
        """
        payload = {
            "id": 1,
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params),
        }
        response = requests.post(self.endpoint, headers=self.headers, json=payload)
        response.raise_for_status()
        answer = response.json()

        error = answer.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RPCError(f"{method} failed: {message}")
        return answer.get("result")

    def rpc_methods(self) -> Dict[str, Any]:
        return self.rpc("rpc_methods")

    def system_properties(self) -> Dict[str, Any]:
        return self.rpc("system_properties")

    def state_get_metadata(self) -> Any:
        """
        Fetch the runtime metadata and decode it into plain Python values.

        Raises:
            NoDataFoundError: If the node returns no metadata
            MetadataDecodeError: If the returned bytes are not runtime metadata
        """
        metadata_hex = self.rpc("state_getMetadata")
        if not isinstance(metadata_hex, str):
            raise NoDataFoundError("Node returned no runtime metadata")

        runtime_config = RuntimeConfigurationObject()
        runtime_config.update_type_registry(load_type_registry_preset("core"))
        try:
            metadata = runtime_config.create_scale_object("MetadataVersioned", data=ScaleBytes(metadata_hex))
            metadata.decode()
        except (
            ValueError,
            IndexError,
            KeyError,
            InvalidScaleTypeValueException,
            RemainingScaleBytesNotEmptyException,
        ) as e:
            raise MetadataDecodeError(f"Could not decode runtime metadata: {e}")
        return metadata.value

    def state_get_storage(self, key: bytes) -> bytes:
        """
        Read the raw value stored under ``key``.

        Raises:
            NoDataFoundError: If nothing is stored under the key
            RPCError: If the node returns something other than hex
        """
        result = self.rpc("state_getStorage", [storage_key_hex(key)])
        if not isinstance(result, str):
            raise NoDataFoundError()
        try:
            return bytes.fromhex(result[2:] if result.startswith("0x") else result)
        except ValueError as e:
            raise RPCError(f"state_getStorage returned malformed hex {result!r}: {e}")
