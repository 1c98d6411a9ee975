from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stake_checker.exceptions import InvalidAccountIdentifierError
from stake_checker.storage import validate_address


class StakeCheckerSettings(BaseSettings):
    """Endpoints, account and local file locations, read from the environment or .env."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Endpoints
    rpc_endpoint: str = Field(..., alias="RPC_ENDPOINT", description="Node JSON-RPC endpoint")
    subquery_endpoint_rewards: str = Field(
        ...,
        alias="SUBQUERY_ENDPOINT_REWARDS",
        description="SubQuery project indexing staking rewards"
    )
    subquery_endpoint_stake_changes: str = Field(
        ...,
        alias="SUBQUERY_ENDPOINT_STAKE_CHANGES",
        description="SubQuery project indexing stake changes"
    )

    # Account
    ss58_format: int = Field(0, alias="SS58_FORMAT", description="SS58 address prefix (0 = Polkadot)")
    polkadot_addr: str = Field(..., alias="POLKADOT_ADDR", description="SS58 address of the account to check")

    # Local files
    known_rewards_file: str = Field(
        "known_rewards.csv",
        alias="KNOWN_REWARDS_FILE",
        description="CSV cache of rewards seen by earlier runs"
    )
    known_stake_changes_file: str = Field(
        "known_stake_changes.csv",
        alias="KNOWN_STAKE_CHANGES_FILE",
        description="CSV cache of stake changes seen by earlier runs"
    )
    polkadot_properties_file: str = Field(
        "polkadot_properties.json",
        alias="POLKADOT_PROPERTIES_FILE",
        description="Cached system_properties answer from the node"
    )
    token_symbol: str = Field("DOT", alias="TOKEN_SYMBOL", description="Fallback token symbol")

    @field_validator("rpc_endpoint", "subquery_endpoint_rewards", "subquery_endpoint_stake_changes")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("polkadot_addr")
    @classmethod
    def _valid_address(cls, value: str, info) -> str:
        ss58_format = info.data.get("ss58_format", 0)
        try:
            return validate_address(value, ss58_format)
        except InvalidAccountIdentifierError as e:
            raise ValueError(str(e))


def describe_settings_error(error: ValidationError) -> str:
    """Turn a settings ValidationError into the one-line messages the CLI prints."""
    messages = []
    for err in error.errors():
        name = str(err["loc"][0]) if err["loc"] else "setting"
        value = err.get("input")
        if err["type"] == "missing" or value == "":
            messages.append(f"No {name} set in .env")
        else:
            messages.append(f"Invalid {name} set in .env: {value}")
    return "\n".join(messages)
