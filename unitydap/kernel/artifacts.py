"""
Defines the data model and the abstract contracts for resolving the
debug adapter binary.

This is the core of the kernel. It defines the 'ports' for which registry
and storage adapters must be provided.
"""
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional, Protocol, Union

from unitydap.internal.constants import UNITY_DAP_DIR_PREFIX


@dataclass(frozen=True)
class Release:
    """
    The latest published adapter release. Fetched fresh on every
    resolution attempt, never cached.
    """
    version: str
    asset_url: str

    @property
    def directory_name(self) -> str:
        return directory_name_for(self.version)


@dataclass(frozen=True)
class LocalInstall:
    """A previously provisioned version directory found on disk."""
    directory_name: str


@dataclass(frozen=True)
class Local:
    """Candidate already present on disk."""
    priority: ClassVar[int] = 1


@dataclass(frozen=True)
class Remote:
    """Candidate that must be downloaded from `url` first."""
    url: str
    priority: ClassVar[int] = 0


# Higher priority wins a tie on directory name.
Source = Union[Local, Remote]


@dataclass(frozen=True)
class Candidate:
    directory_name: str
    source: Source

    @classmethod
    def from_release(cls, release: Release) -> "Candidate":
        return cls(directory_name=release.directory_name, source=Remote(url=release.asset_url))

    @classmethod
    def from_install(cls, install: LocalInstall) -> "Candidate":
        return cls(directory_name=install.directory_name, source=Local())

    @property
    def is_remote(self) -> bool:
        return isinstance(self.source, Remote)


@dataclass(frozen=True)
class CachedBinary:
    absolute_path: str
    directory_name: Optional[str] = None


def directory_name_for(version: str) -> str:
    return f"{UNITY_DAP_DIR_PREFIX}-{version}"


def version_of(directory_name: str) -> str:
    """Strips the artifact prefix from a version directory name."""
    prefix = f"{UNITY_DAP_DIR_PREFIX}-"
    if directory_name.startswith(prefix):
        return directory_name[len(prefix):]
    return directory_name


class ReleaseSource(Protocol):
    """
    The interface (port) for any registry that can report the latest
    release of the adapter.
    """

    @abstractmethod
    def latest_release(self) -> Release:
        """
        Returns the latest non-prerelease release with a downloadable archive.

        Raises:
            RegistryError: the registry could not be queried, or no release
                or asset qualifies.
        """
        ...


class Inventory(Protocol):
    """The interface (port) for listing previously provisioned versions."""

    # Root the versions are listed from.
    work_dir: Path

    @abstractmethod
    def list_installs(self) -> list[LocalInstall]:
        """
        Raises:
            FilesystemError: the install root could not be read.
        """
        ...


class Provisioner(Protocol):
    """
    The interface (port) for making a candidate's executable present on disk.
    """

    @abstractmethod
    def provision(self, candidate: Candidate) -> str:
        """
        Returns the absolute path of the executable.

        Raises:
            VerificationError: download, unpack or existence check failed.
        """
        ...
