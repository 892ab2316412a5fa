"""
Error taxonomy for adapter resolution.

Recoverable errors (registry, filesystem enumeration, per-candidate
verification) are collected by the resolver and only surfaced, all together,
through an ExhaustionError when nothing could be resolved.
"""
from typing import Sequence


class UnityDapError(Exception):
    """Base class for every error raised by unitydap."""


class ConfigError(UnityDapError):
    """The debug task configuration is missing or malformed."""


class RegistryError(UnityDapError):
    """The release registry is unreachable or has no usable release."""


class FilesystemError(UnityDapError):
    """The install root could not be enumerated."""


class VerificationError(UnityDapError):
    """A candidate could not be provisioned or its executable is missing."""


class ExhaustionError(UnityDapError):
    """
    No candidate could be resolved.

    Carries every recoverable error collected during resolution, in the
    order they were encountered.
    """

    def __init__(self, causes: Sequence[Exception]):
        self.causes = list(causes)
        super().__init__(self._render(self.causes))

    @staticmethod
    def _render(causes: list[Exception]) -> str:
        if not causes:
            return "failed to resolve unity-debug-adapter: no candidates available"
        lines = [f"failed to resolve unity-debug-adapter ({len(causes)} error(s)):"]
        lines.extend(f"  - {cause}" for cause in causes)
        return "\n".join(lines)
