import threading
from typing import Any, Optional

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel

from unitydap.host.extension import (
    AttachRequest,
    LaunchRequest,
    UnityDebugExtension,
    compute_scenario,
    resolve_binary,
)
from unitydap.internal import paths
from unitydap.internal.constants import DEBUG_ADAPTER_NAME, RUNTIME_HOST, RUNTIME_PORT
from unitydap.internal.logging import get_logger, setup_logging
from unitydap.kernel.artifacts import Candidate
from unitydap.kernel.errors import ConfigError, ExhaustionError, FilesystemError, VerificationError
from unitydap.kernel.ranking import rank

# ---------------------------------------------------------------------
# App
# ---------------------------------------------------------------------

logger = get_logger(__name__)
app = FastAPI(title="unitydap")
cli_app = typer.Typer()

# One extension per process: its resolver cache lives as long as the server.
_extension: Optional[UnityDebugExtension] = None
_extension_lock = threading.Lock()


def get_extension() -> UnityDebugExtension:
    global _extension
    with _extension_lock:
        if _extension is None:
            _extension = UnityDebugExtension()
        return _extension


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------

class ScenarioInput(BaseModel):
    label: str
    request: str = "attach"
    process_id: Optional[int] = None


class BinaryInput(BaseModel):
    adapter_name: str = DEBUG_ADAPTER_NAME
    config: str
    user_provided_path: Optional[str] = None
    workspace_root: str
    env: Optional[dict[str, str]] = None


# ---------------------------------------------------------------------
# Endpoints (adapt HTTP to the extension surface)
# ---------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/scenario")
def scenario_endpoint(payload: ScenarioInput) -> dict[str, Any]:
    request = AttachRequest(process_id=payload.process_id) if payload.request == "attach" else LaunchRequest()
    try:
        return compute_scenario(get_extension(), payload.label, request).to_dict()
    except ConfigError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@app.post("/binary")
def binary_endpoint(payload: BinaryInput) -> dict[str, Any]:
    try:
        binary = resolve_binary(
            get_extension(),
            payload.adapter_name,
            payload.config,
            payload.user_provided_path,
            payload.workspace_root,
            env=payload.env,
        )
    except ConfigError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except VerificationError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ExhaustionError as e:
        logger.error("Adapter resolution failed", causes=[str(c) for c in e.causes])
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return binary.to_dict()


@app.get("/installs")
def installs_endpoint() -> dict[str, Any]:
    resolver = get_extension().resolver
    cached = resolver.cached
    try:
        installs = resolver.inventory.list_installs()
    except FilesystemError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return {
        "work_dir": str(resolver.inventory.work_dir),
        # Same order the resolver attempts them in.
        "installs": [
            c.directory_name
            for c in rank(None, [Candidate.from_install(i) for i in installs], ordering=resolver.ordering)
        ],
        "cached": cached.absolute_path if cached else None,
    }


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------

@cli_app.command()
def main(
    host: str = typer.Option(RUNTIME_HOST, help="Host to bind the server to."),
    port: int = typer.Option(RUNTIME_PORT, help="Port to bind the server to."),
):
    """
    Serve the extension surface over HTTP for hosts that cannot embed Python.
    """
    setup_logging(log_file_path=paths.get_log_file(), console_output=True)
    logger.info("Starting API server", host=host, port=port)
    uvicorn.run(
        app,
        host=host,
        port=port,
        workers=1,
        reload=False,
    )


if __name__ == "__main__":
    cli_app()
