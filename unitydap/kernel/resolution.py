"""
This module defines the resolution service of the unitydap kernel.
It decides which copy of the debug adapter to use, delegating to the
registry, inventory and provisioner adapters, and caches the outcome for
the lifetime of the resolver instance.
"""
import threading
from typing import Optional

from unitydap.internal.logging import get_logger
from unitydap.kernel.artifacts import (
    CachedBinary,
    Candidate,
    Inventory,
    Provisioner,
    ReleaseSource,
)
from unitydap.kernel.errors import (
    ExhaustionError,
    FilesystemError,
    RegistryError,
    VerificationError,
)
from unitydap.kernel.ranking import LEXICOGRAPHIC, rank

logger = get_logger(__name__)


class BinaryResolver:
    """
    Resolves, provisions and caches the adapter executable.

    Once a resolution succeeds, later calls return the cached path without
    touching the network or the filesystem. A new instance is required to
    force re-resolution. The whole operation runs under a lock, so
    concurrent callers resolve at most once.
    """

    def __init__(
        self,
        release_source: ReleaseSource,
        inventory: Inventory,
        provisioner: Provisioner,
        ordering: str = LEXICOGRAPHIC,
    ):
        self.release_source = release_source
        self.inventory = inventory
        self.provisioner = provisioner
        self.ordering = ordering
        self._cached: Optional[CachedBinary] = None
        self._lock = threading.Lock()

    @property
    def cached(self) -> Optional[CachedBinary]:
        return self._cached

    def resolve(self) -> str:
        with self._lock:
            if self._cached is not None:
                return self._cached.absolute_path

            errors: list[Exception] = []
            remote = self._remote_candidate(errors)
            local = self._local_candidates(errors, has_remote=remote is not None)
            ranked = rank(remote, local, ordering=self.ordering)
            logger.debug(
                "Ranked adapter candidates",
                candidates=[c.directory_name for c in ranked],
            )

            for candidate in ranked:
                try:
                    path = self.provisioner.provision(candidate)
                except VerificationError as e:
                    logger.warning(
                        "Candidate failed, falling back",
                        directory=candidate.directory_name,
                        remote=candidate.is_remote,
                        error=str(e),
                    )
                    errors.append(e)
                    continue

                self._cached = CachedBinary(absolute_path=path, directory_name=candidate.directory_name)
                logger.info("Resolved unity-debug-adapter", path=path, remote=candidate.is_remote)
                return path

            raise ExhaustionError(errors)

    def _remote_candidate(self, errors: list[Exception]) -> Optional[Candidate]:
        try:
            release = self.release_source.latest_release()
        except RegistryError as e:
            logger.warning("Release lookup failed, continuing with local installs", error=str(e))
            errors.append(e)
            return None
        return Candidate.from_release(release)

    def _local_candidates(self, errors: list[Exception], has_remote: bool) -> list[Candidate]:
        try:
            installs = self.inventory.list_installs()
        except FilesystemError as e:
            errors.append(e)
            if not has_remote:
                raise ExhaustionError(errors) from e
            logger.warning("Local installs unreadable, continuing with remote release", error=str(e))
            return []
        return [Candidate.from_install(install) for install in installs]
