"""
Concrete Inventory and Provisioner implementations that keep adapter
versions as `unity-debug-adapter-<version>` directories under a work
directory on the local filesystem.
"""
import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

import requests

from unitydap.internal import paths
from unitydap.internal.constants import DOWNLOAD_TIMEOUT_SECONDS, UNITY_DAP_DIR_PREFIX
from unitydap.internal.logging import get_logger
from unitydap.kernel.artifacts import Candidate, Inventory, LocalInstall, Provisioner, Remote
from unitydap.kernel.errors import FilesystemError, VerificationError

logger = get_logger(__name__)


class FileSystemInventory(Inventory):
    """
    Lists version directories directly under the work directory.
    """

    def __init__(self, work_dir: Path, prefix: str = UNITY_DAP_DIR_PREFIX):
        self.work_dir = Path(work_dir)
        self.prefix = f"{prefix}-"

    def list_installs(self) -> list[LocalInstall]:
        try:
            names = [entry.name for entry in self.work_dir.iterdir()]
        except OSError as e:
            raise FilesystemError(f"failed to read working directory: {e}") from e
        return [LocalInstall(directory_name=name) for name in names if name.startswith(self.prefix)]


class FileSystemProvisioner(Provisioner):
    """
    Makes a candidate's executable present under the work directory.

    Local candidates are only checked for existence. Remote candidates are
    downloaded and unpacked into a fresh directory named after their
    version first; an existing directory is never written into.
    """

    def __init__(self, work_dir: Path, session: Optional[requests.Session] = None):
        self.work_dir = Path(work_dir).absolute()
        self._session = session or requests.Session()

    def provision(self, candidate: Candidate) -> str:
        install_dir = self.work_dir / candidate.directory_name
        if isinstance(candidate.source, Remote):
            self._download_and_unpack(candidate.source.url, install_dir)

        binary_path = paths.binary_path_in(install_dir)
        if not binary_path.is_file():
            if isinstance(candidate.source, Remote):
                # Unpacked by this call, so it is not a usable install yet.
                shutil.rmtree(install_dir, ignore_errors=True)
            raise VerificationError(f"unity-debug-adapter does not exist at expected path: {binary_path}")

        if isinstance(candidate.source, Remote):
            self._make_executable(binary_path)
        return str(binary_path)

    # ---------------------------------------------------------------------
    # Download + unpack
    # ---------------------------------------------------------------------

    def _download_and_unpack(self, url: str, install_dir: Path) -> None:
        if install_dir.exists():
            raise VerificationError(
                f"failed to download unity-debug-adapter: {install_dir} already exists"
            )

        logger.info("Downloading unity-debug-adapter", url=url, destination=str(install_dir))
        try:
            staging = Path(tempfile.mkdtemp(prefix=f".{install_dir.name}.", dir=self.work_dir))
        except OSError as e:
            raise VerificationError(f"failed to download unity-debug-adapter: {e}") from e

        archive = staging.parent / f"{staging.name}.zip"
        try:
            self._download_file(url, archive)
            self._extract_zip(archive, staging)
            staging.rename(install_dir)
        except (requests.RequestException, zipfile.BadZipFile, OSError, ValueError) as e:
            shutil.rmtree(staging, ignore_errors=True)
            raise VerificationError(f"failed to download unity-debug-adapter: {e}") from e
        finally:
            if archive.exists():
                archive.unlink()

    def _download_file(self, url: str, target_path: Path) -> None:
        with self._session.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS) as r:
            r.raise_for_status()
            with open(target_path, "wb") as f:
                for chunk in r.iter_content(chunk_size=1024 * 1024):
                    f.write(chunk)

    @staticmethod
    def _extract_zip(archive: Path, destination: Path) -> None:
        root = destination.resolve()
        with zipfile.ZipFile(archive) as zf:
            for member in zf.namelist():
                target = (root / member).resolve()
                if target != root and root not in target.parents:
                    raise ValueError(f"Unsafe path in zip archive: {member}")
            zf.extractall(root)

    @staticmethod
    def _make_executable(binary_path: Path) -> None:
        try:
            mode = binary_path.stat().st_mode
            os.chmod(binary_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise VerificationError(f"failed to make {binary_path} executable: {e}") from e
