from __future__ import annotations

import argparse
import os
import shlex
import subprocess
import sys
from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 56471


def _format_cmd(cmd: list[str]) -> str:
    if os.name == "nt":
        return subprocess.list2cmdline(cmd)
    return shlex.join(cmd)


def _run(cmd: list[str]) -> int:
    print(f"+ {_format_cmd(cmd)}")
    return subprocess.run(cmd, cwd=ROOT_DIR, env=os.environ.copy()).returncode


def _venv_python() -> Path:
    if os.name == "nt":
        return ROOT_DIR / ".venv" / "Scripts" / "python.exe"
    return ROOT_DIR / ".venv" / "bin" / "python"


def _python_for_tasks() -> str:
    venv_python = _venv_python()
    return str(venv_python) if venv_python.exists() else sys.executable


def _passthrough(values: list[str] | None) -> list[str]:
    args = list(values or [])
    if args and args[0] == "--":
        args = args[1:]
    return args


def cmd_setup(args: argparse.Namespace) -> int:
    if args.venv and not _venv_python().exists():
        code = _run([sys.executable, "-m", "venv", ".venv"])
        if code != 0:
            return code
    return _run([_python_for_tasks(), "-m", "pip", "install", "-e", ".[test]"])


def cmd_test(args: argparse.Namespace) -> int:
    return _run([_python_for_tasks(), "-m", "pytest", *_passthrough(args.pytest_args)])


def cmd_cli(args: argparse.Namespace) -> int:
    return _run([_python_for_tasks(), "-m", "threat_workbench.cli.main", *_passthrough(args.cli_args)])


def cmd_seed(args: argparse.Namespace) -> int:
    return _run([_python_for_tasks(), str(ROOT_DIR / "scripts" / "seed_demo.py")])


def cmd_web(args: argparse.Namespace) -> int:
    if not (ROOT_DIR / "app" / "main.py").exists():
        print("error: app/main.py not found.", file=sys.stderr)
        return 2
    print(f"starting web app at http://{args.host}:{args.port}")
    return _run(
        [
            _python_for_tasks(),
            "-m",
            "uvicorn",
            "app.main:app",
            "--host",
            args.host,
            "--port",
            str(args.port),
            "--reload",
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Task runner for Threat Workbench.")
    sub = parser.add_subparsers(dest="command", required=True)

    setup_parser = sub.add_parser("setup", help="Install project dependencies.")
    setup_parser.add_argument("--venv", action="store_true", help="Create .venv if missing before install.")
    setup_parser.set_defaults(func=cmd_setup)

    test_parser = sub.add_parser("test", help="Run pytest.")
    test_parser.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Optional pytest args.")
    test_parser.set_defaults(func=cmd_test)

    cli_parser = sub.add_parser("cli", help="Run the threat-workbench CLI.")
    cli_parser.add_argument("cli_args", nargs=argparse.REMAINDER, help="Args forwarded to cli.main.")
    cli_parser.set_defaults(func=cmd_cli)

    seed_parser = sub.add_parser("seed", help="Seed a demo project into the runtime database.")
    seed_parser.set_defaults(func=cmd_seed)

    web_parser = sub.add_parser("web", help=f"Run the FastAPI app on {DEFAULT_HOST}:{DEFAULT_PORT}.")
    web_parser.add_argument("--host", default=DEFAULT_HOST, help="Web host.")
    web_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Web port.")
    web_parser.set_defaults(func=cmd_web)

    return parser


def main() -> int:
    args = build_parser().parse_args()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
