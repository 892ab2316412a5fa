import os
from pathlib import Path

from unitydap.internal.constants import (
    UNITY_DAP_BINARY_NAME,
    UNITY_DAP_BINARY_SUFFIX,
    UNITY_DAP_RELEASE_DIR,
)


# ---------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------

def get_app_data_dir() -> Path:
    """
    Returns the application data directory.

    - Windows: %APPDATA%\\unitydap
    - Linux/macOS: ~/.unitydap
    """
    if os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", str(Path.home()))
        path = Path(base) / "unitydap"
    else:  # Linux / macOS
        path = Path.home() / ".unitydap"

    path.mkdir(parents=True, exist_ok=True)
    return path


def get_work_dir() -> Path:
    """
    Root directory holding provisioned adapter versions.

    Defaults to the current working directory, like the editor extension
    sandbox the adapter was originally installed into.
    """
    override = os.environ.get("UNITYDAP_WORK_DIR")
    if override:
        return Path(override).absolute()
    return Path.cwd()


def get_log_file() -> Path:
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "unitydap.log.json"


# ---------------------------------------------------------------------
# Adapter layout
# ---------------------------------------------------------------------

def binary_file_name() -> str:
    return f"{UNITY_DAP_BINARY_NAME}{UNITY_DAP_BINARY_SUFFIX}"


def binary_path_in(install_dir: Path) -> Path:
    """
    Location of the adapter executable inside a version directory.
    """
    return install_dir / UNITY_DAP_RELEASE_DIR / binary_file_name()


if __name__ == "__main__":
    print("App Data Dir:", get_app_data_dir())
    print("Work Dir:", get_work_dir())
    print("Log File:", get_log_file())
