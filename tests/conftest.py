import io
import zipfile
from pathlib import Path
import pytest

from unitydap.internal.logging import setup_logging
from unitydap.kernel.artifacts import Candidate, LocalInstall, Release
from unitydap.kernel.errors import FilesystemError, RegistryError, VerificationError

ENV_VARS = (
    "UNITYDAP_WORK_DIR",
    "UNITYDAP_LOG_LEVEL",
    "UNITYDAP_VERSION_ORDER",
    "UNITYDAP_MONO_PATH",
    "UNITYDAP_DEV",
    "GITHUB_TOKEN",
)

# --- Isolation ---

@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """
    Keeps app data (log files) inside tmp_path and clears configuration
    variables, so no test depends on the developer's environment.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("APPDATA", str(home))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    # Route structlog through stdlib logging from the first test on, then let
    # each test configure handlers again.
    setup_logging(log_level_name="DEBUG")
    monkeypatch.setattr("unitydap.internal.logging._LOGGING_CONFIGURED", False)
    yield


# --- Fakes for the kernel ports ---

class FakeReleaseSource:
    """Returns a fixed release, or raises a RegistryError."""
    def __init__(self, release: Release | None = None, error: str | None = None):
        self.release = release
        self.error = error
        self.calls = 0

    def latest_release(self) -> Release:
        self.calls += 1
        if self.error:
            raise RegistryError(self.error)
        return self.release


class FakeInventory:
    def __init__(self, names: list[str] | None = None, error: str | None = None, work_dir: str = "/adapters"):
        self.names = names or []
        self.work_dir = Path(work_dir)
        self.error = error
        self.calls = 0

    def list_installs(self) -> list[LocalInstall]:
        self.calls += 1
        if self.error:
            raise FilesystemError(self.error)
        return [LocalInstall(directory_name=n) for n in self.names]


class FakeProvisioner:
    """
    Succeeds for directory names in `working`, fails for everything else.
    Records every candidate it was asked to provision.
    """
    def __init__(self, working: set[str] | None = None, root: str = "/adapters"):
        self.working = working or set()
        self.root = root
        self.attempts: list[Candidate] = []

    def provision(self, candidate: Candidate) -> str:
        self.attempts.append(candidate)
        if candidate.directory_name not in self.working:
            raise VerificationError(f"unity-debug-adapter does not exist at expected path: {candidate.directory_name}")
        return f"{self.root}/{candidate.directory_name}/Release/unity-debug-adapter.exe"


@pytest.fixture
def fake_release_source():
    return FakeReleaseSource


@pytest.fixture
def fake_inventory():
    return FakeInventory


@pytest.fixture
def fake_provisioner():
    return FakeProvisioner


# --- Adapter archives ---

def build_adapter_zip(with_binary: bool = True) -> bytes:
    """A release archive laid out like the published unity-debug-adapter.zip."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        if with_binary:
            zf.writestr("Release/unity-debug-adapter.exe", b"MZ fake assembly")
        zf.writestr("Release/Mono.Debugging.dll", b"dll")
    return buffer.getvalue()


@pytest.fixture
def adapter_zip():
    return build_adapter_zip


@pytest.fixture
def work_dir(tmp_path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def make_install(work_dir):
    """Creates a fully provisioned version directory under work_dir."""
    def _make(version: str, with_binary: bool = True) -> Path:
        install_dir = work_dir / f"unity-debug-adapter-{version}"
        (install_dir / "Release").mkdir(parents=True)
        if with_binary:
            (install_dir / "Release" / "unity-debug-adapter.exe").write_bytes(b"MZ")
        return install_dir
    return _make


def release_listing(version: str = "2.0.0", asset_url: str | None = None, **overrides) -> list[dict]:
    """A minimal GitHub `GET /repos/{repo}/releases` response body."""
    asset_url = asset_url or f"https://github.com/walcht/unity-dap/releases/download/{version}/unity-debug-adapter.zip"
    release = {
        "tag_name": version,
        "draft": False,
        "prerelease": False,
        "assets": [{"name": "unity-debug-adapter.zip", "browser_download_url": asset_url}],
    }
    release.update(overrides)
    return [release]


@pytest.fixture
def github_releases():
    return release_listing
