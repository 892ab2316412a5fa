"""
Parsing and validation of the user-supplied debug task configuration.
"""
import json
import platform
from ipaddress import IPv4Address
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from unitydap.internal.constants import (
    DEFAULT_ADDRESS,
    DEFAULT_MONO,
    MACOS_MONO,
    MONO_PATH_ENV,
    default_log_level,
)
from unitydap.kernel.errors import ConfigError


class DapTaskConfig(BaseModel):
    """
    The recognized keys of a UnityDAP debug task. Unknown keys are ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mono_path: Optional[str] = Field(default=None, alias="monoPath")
    log_level: Optional[str] = Field(default=None, alias="logLevel")
    address: IPv4Address = Field(default=IPv4Address(DEFAULT_ADDRESS))
    port: int = Field(strict=True, ge=0, le=65535)


def _describe(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "config"
        if location == "port":
            problems.append("must provide a valid port")
        elif location == "address":
            problems.append(f"failed to parse valid address `{detail.get('input')}`: {detail.get('msg')}")
        else:
            problems.append(f"{location}: {detail.get('msg')}")
    return "; ".join(problems)


def parse_task_config(raw: str | Mapping[str, Any]) -> DapTaskConfig:
    """
    Parses the task configuration, given either as JSON text or as an
    already decoded object.

    Raises:
        ConfigError: the JSON is malformed, not an object, or fails validation.
    """
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"failed to parse config: {e}") from e
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise ConfigError("failed to parse config: expected a JSON object")

    try:
        return DapTaskConfig.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e


def platform_default_mono() -> str:
    if platform.system() == "Darwin":
        return MACOS_MONO
    return DEFAULT_MONO


def effective_mono_path(config: DapTaskConfig, env: Mapping[str, str]) -> str:
    """monoPath from the config, then the worktree environment, then the platform default."""
    return config.mono_path or env.get(MONO_PATH_ENV) or platform_default_mono()


def effective_log_level(config: DapTaskConfig) -> str:
    return config.log_level or default_log_level()
