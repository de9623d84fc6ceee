"""
Configuration loading and validation for the cycle arbitrage engine.

Tunables come from an optional YAML file; secrets and endpoints come from
the environment (a `.env` file is loaded by the CLI) and override the file.
"""

import os
import re
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from web3 import Web3

from .exceptions import ConfigurationError
from .utils import to_wei

WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
DEFAULT_POOLS = ["0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc"]  # USDC/WETH
DEFAULT_RELAY_URL = "https://relay.flashbots.net"
# Relay identity only; it never holds funds.
DEFAULT_RELAY_SIGNING_KEY = "0x" + "0" * 63 + "1"

ENV_FIELDS = {
    "WSS_URL": "wss_url",
    "PRIVATE_KEY": "private_key",
    "EXECUTOR_ADDRESS": "executor_address",
    "RELAY_URL": "relay_url",
    "RELAY_SIGNING_KEY": "relay_signing_key",
    "BASE_TOKEN": "base_token",
}

_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def _check_private_key(value: str, name: str) -> str:
    if not _PRIVATE_KEY_RE.match(value):
        raise ValueError(f"{name} must be 32 bytes of hex (64 characters, optional 0x)")
    return value if value.startswith("0x") else "0x" + value


def _check_address(value: str, name: str) -> str:
    if not Web3.is_address(value):
        raise ValueError(f"{name} is not a valid address: {value}")
    return Web3.to_checksum_address(value)


class ArbConfig(BaseModel):
    """Validated runtime configuration."""

    wss_url: str = Field(min_length=1, description="Websocket RPC endpoint")
    private_key: str = Field(repr=False, description="Signer key for executor calls")
    executor_address: str = Field(description="Deployed executor contract")

    relay_url: str = DEFAULT_RELAY_URL
    relay_signing_key: str = Field(default=DEFAULT_RELAY_SIGNING_KEY, repr=False)

    base_token: str = WETH_ADDRESS
    input_amount_eth: Decimal = Field(default=Decimal("10"), gt=0)
    min_profit_eth: Decimal = Field(default=Decimal("0.05"), ge=0)
    bribe_percent: int = Field(default=90, ge=0, le=100)
    max_depth: int = Field(default=4, ge=2, le=8)
    fee_numerator: int = Field(default=997, gt=0, le=1000)
    pools: List[str] = Field(default_factory=lambda: list(DEFAULT_POOLS))

    gas_limit: int = Field(default=500_000, gt=21_000)
    simulate_bundles: bool = False
    fatal_exit_delay: float = Field(default=60.0, ge=0)

    @field_validator("wss_url")
    @classmethod
    def validate_wss_url(cls, v):
        if not v.startswith(("ws://", "wss://")):
            raise ValueError("wss_url must be a ws:// or wss:// URL")
        return v

    @field_validator("private_key")
    @classmethod
    def validate_private_key(cls, v):
        return _check_private_key(v, "private_key")

    @field_validator("relay_signing_key")
    @classmethod
    def validate_relay_signing_key(cls, v):
        return _check_private_key(v, "relay_signing_key")

    @field_validator("executor_address")
    @classmethod
    def validate_executor_address(cls, v):
        return _check_address(v, "executor_address")

    @field_validator("base_token")
    @classmethod
    def validate_base_token(cls, v):
        return _check_address(v, "base_token")

    @field_validator("pools")
    @classmethod
    def validate_pools(cls, v):
        if not v:
            raise ValueError("At least one pool address is required")
        return [_check_address(p, "pool") for p in v]

    @property
    def input_amount_wei(self) -> int:
        return to_wei(self.input_amount_eth)

    @property
    def min_profit_wei(self) -> int:
        return to_wei(self.min_profit_eth)


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML config file into a dictionary."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(
            f"Config file not found: {path}", {"config_file": str(path)}
        )
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}: {e}", {"config_file": str(path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping", {"config_file": str(path)}
        )
    return data


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ArbConfig:
    """
    Build the runtime configuration.

    Args:
        config_path: Optional YAML file with tunables
        env: Environment mapping (defaults to os.environ)

    Raises:
        ConfigurationError: If a required value is missing or malformed
    """
    env = os.environ if env is None else env
    values: Dict[str, Any] = load_yaml_config(config_path) if config_path else {}

    for env_name, field_name in ENV_FIELDS.items():
        if env.get(env_name):
            values[field_name] = env[env_name]

    try:
        return ArbConfig(**values)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems), {"errors": problems}
        ) from e
