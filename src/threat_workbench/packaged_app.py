from __future__ import annotations

import argparse
import os
import socket
from pathlib import Path

import uvicorn

from threat_workbench import get_runtime_version

HOST = "127.0.0.1"
PREFERRED_PORT = 56471


def port_is_free(port: int, host: str = HOST) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, int(port)))
        except OSError:
            return False
    return True


def find_port(preferred_port: int = PREFERRED_PORT, max_attempts: int = 50, host: str = HOST) -> int:
    for port in range(preferred_port, preferred_port + max_attempts):
        if port_is_free(port, host):
            return port
    # Let the OS pick one.
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return int(sock.getsockname()[1])


def configure_runtime_env() -> Path:
    from app.config import default_runtime_dir

    configured = os.getenv("RUNTIME_DIR", "").strip()
    runtime_dir = Path(configured).expanduser() if configured else default_runtime_dir()
    runtime_dir.mkdir(parents=True, exist_ok=True)
    os.environ.setdefault("RUNTIME_DIR", str(runtime_dir))
    os.environ.setdefault("DATABASE_URL", f"sqlite:///{(runtime_dir / 'threat_workbench.db').as_posix()}")
    return runtime_dir


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="threat-workbench-app", description="Run the Threat Workbench API locally.")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=0, help="Port to bind (default: first free from 56471)")
    args = parser.parse_args(argv)

    data_dir = configure_runtime_env()
    from app.main import app as fastapi_app

    port = args.port or find_port(PREFERRED_PORT, host=args.host)
    print(f"Version: {get_runtime_version()}", flush=True)
    print(f"API docs: http://{args.host}:{port}/docs", flush=True)
    print(f"Data dir: {data_dir.resolve()}", flush=True)

    uvicorn.run(fastapi_app, host=args.host, port=port, reload=False, access_log=False, log_level="warning")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
