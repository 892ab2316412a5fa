"""
The host-facing surface: turns debug configurations into scenarios and
launch descriptors for the UnityDAP debug adapter.
"""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from unitydap.adapters.github_releases import GitHubReleaseSource
from unitydap.adapters.storage_fs import FileSystemInventory, FileSystemProvisioner
from unitydap.host.config import effective_log_level, effective_mono_path, parse_task_config
from unitydap.internal import paths
from unitydap.internal.constants import DEBUG_ADAPTER_NAME
from unitydap.internal.logging import get_logger
from unitydap.kernel.errors import ConfigError, VerificationError
from unitydap.kernel.ranking import ordering_from_env
from unitydap.kernel.resolution import BinaryResolver
from unitydap.runtime.system import unity_debugger_port

logger = get_logger(__name__)

ATTACH = "attach"
LAUNCH = "launch"


# ---------------------------------------------------------------------
# Host data contracts
# ---------------------------------------------------------------------

@dataclass
class AttachRequest:
    process_id: Optional[int] = None


@dataclass
class LaunchRequest:
    program: str = ""
    args: list[str] = field(default_factory=list)


DebugRequest = Union[AttachRequest, LaunchRequest]


@dataclass
class DebugConfig:
    label: str
    adapter: str
    request: DebugRequest


@dataclass
class DebugScenario:
    label: str
    adapter: str
    config: str
    tcp_connection: None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "adapter": self.adapter,
            "config": json.loads(self.config),
            "tcp_connection": self.tcp_connection,
        }


@dataclass
class DebugTaskDefinition:
    label: str
    adapter: str
    config: str


@dataclass
class Worktree:
    root_path: str
    env: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))


@dataclass
class StartDebuggingRequestArguments:
    configuration: str
    request: str


@dataclass
class DebugAdapterBinary:
    command: str
    arguments: list[str]
    cwd: str
    env: dict[str, str]
    request_args: StartDebuggingRequestArguments

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "arguments": list(self.arguments),
            "cwd": self.cwd,
            "env": dict(self.env),
            "request_args": {
                "configuration": json.loads(self.request_args.configuration),
                "request": self.request_args.request,
            },
        }


# ---------------------------------------------------------------------
# Extension
# ---------------------------------------------------------------------

def default_resolver(work_dir: Optional[Path] = None) -> BinaryResolver:
    work_dir = work_dir or paths.get_work_dir()
    return BinaryResolver(
        release_source=GitHubReleaseSource(),
        inventory=FileSystemInventory(work_dir),
        provisioner=FileSystemProvisioner(work_dir),
        ordering=ordering_from_env(),
    )


class UnityDebugExtension:
    """
    One instance per host session. Owns the resolver, and with it the
    cached adapter path; reloading the extension means creating a new one.
    """

    def __init__(self, resolver: Optional[BinaryResolver] = None):
        self.resolver = resolver or default_resolver()

    def dap_request_kind(self, adapter_name: str, config: Any) -> str:
        return ATTACH

    def dap_config_to_scenario(self, config: DebugConfig) -> DebugScenario:
        if not isinstance(config.request, AttachRequest):
            raise ConfigError("UnityDAP only supports attaching to running processes")

        scenario_config: dict[str, Any] = {}
        if config.request.process_id is not None:
            scenario_config["port"] = unity_debugger_port(config.request.process_id)

        return DebugScenario(
            label=config.label,
            adapter=config.adapter,
            config=json.dumps(scenario_config),
        )

    def get_dap_binary(
        self,
        adapter_name: str,
        config: DebugTaskDefinition,
        user_provided_debug_adapter_path: Optional[str],
        worktree: Worktree,
    ) -> DebugAdapterBinary:
        if adapter_name != DEBUG_ADAPTER_NAME:
            raise ConfigError(
                f"debug adapter must be set to '{DEBUG_ADAPTER_NAME}' (requested '{adapter_name}')"
            )

        task = parse_task_config(config.config)
        mono_path = effective_mono_path(task, worktree.env)
        log_level = effective_log_level(task)

        if user_provided_debug_adapter_path:
            binary = str(Path(user_provided_debug_adapter_path).absolute())
            if not Path(binary).is_file():
                raise VerificationError(f"unity-debug-adapter does not exist at expected path: {binary}")
        else:
            binary = self.resolver.resolve()

        logger.debug("Prepared adapter launch", binary=binary, mono=mono_path, log_level=log_level)
        return DebugAdapterBinary(
            command=mono_path,
            arguments=[binary, f"--log-level={log_level}"],
            cwd=worktree.root_path,
            env={},
            request_args=StartDebuggingRequestArguments(
                configuration=json.dumps({"address": str(task.address), "port": task.port}),
                request=self.dap_request_kind(adapter_name, config.config),
            ),
        )


# Host-neutral entry points

def compute_scenario(extension: UnityDebugExtension, label: str, request: DebugRequest) -> DebugScenario:
    return extension.dap_config_to_scenario(
        DebugConfig(label=label, adapter=DEBUG_ADAPTER_NAME, request=request)
    )


def resolve_binary(
    extension: UnityDebugExtension,
    adapter_name: str,
    task_config: str,
    user_supplied_path: Optional[str],
    workspace_root: str,
    env: Optional[Mapping[str, str]] = None,
) -> DebugAdapterBinary:
    worktree = Worktree(root_path=workspace_root) if env is None else Worktree(root_path=workspace_root, env=env)
    task = DebugTaskDefinition(label=adapter_name, adapter=adapter_name, config=task_config)
    return extension.get_dap_binary(adapter_name, task, user_supplied_path, worktree)
