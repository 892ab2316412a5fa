import os

# ---------------------------------------------------------------------
# Debug adapter artifact
# ---------------------------------------------------------------------

DEBUG_ADAPTER_NAME = "UnityDAP"

UNITY_DAP_GITHUB = "walcht/unity-dap"
UNITY_DAP_ASSET_NAME = "unity-debug-adapter.zip"
UNITY_DAP_DIR_PREFIX = "unity-debug-adapter"
UNITY_DAP_BINARY_NAME = "unity-debug-adapter"

# The adapter is a managed assembly started through mono on every platform.
UNITY_DAP_BINARY_SUFFIX = ".exe"
UNITY_DAP_RELEASE_DIR = "Release"

# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

GITHUB_API_URL = "https://api.github.com"
GITHUB_USER_AGENT = "unitydap"
HTTP_TIMEOUT_SECONDS = float(os.environ.get("UNITYDAP_HTTP_TIMEOUT", "30"))
DOWNLOAD_TIMEOUT_SECONDS = 60

# ---------------------------------------------------------------------
# Debug session defaults
# ---------------------------------------------------------------------

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_MONO = "mono"
MACOS_MONO = "/Library/Frameworks/Mono.framework/Versions/Current/Commands/mono"
MONO_PATH_ENV = "UNITYDAP_MONO_PATH"

# Unity editor/player debugger agents listen on 56000 + (pid % 1000).
UNITY_DEBUGGER_PORT_BASE = 56000
UNITY_DEBUGGER_PORT_SPAN = 1000

# ---------------------------------------------------------------------
# Runtime bridge
# ---------------------------------------------------------------------

RUNTIME_HOST = "127.0.0.1"
RUNTIME_PORT = 8765


def is_dev_build() -> bool:
    return os.environ.get("UNITYDAP_DEV", "").lower() in ("1", "true", "yes")


def default_log_level() -> str:
    return "trace" if is_dev_build() else "warn"
