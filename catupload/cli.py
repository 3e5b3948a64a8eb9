"""Command line interface for the catupload package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from rich.logging import RichHandler

from . import __version__
from .cli_progress import (
    ConsoleNotifier,
    SessionProgressDisplay,
    render_configuration_summary,
    render_selected_file,
)
from .links import InvalidLinkError, resolve_upload_target
from .models import SelectedFile, SessionState, TransferStrategy, UploadConfig
from .session import SessionController
from .transfer import build_driver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        requested = log_level if log_level.lower() != "env" else os.getenv("LOG_LEVEL", "INFO")
        level = getattr(logging, requested.upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _resolve_config(args: argparse.Namespace) -> UploadConfig:
    """Environment first, command line flags on top."""
    try:
        config = UploadConfig.from_env()
    except ValueError as exc:
        raise CLIError(str(exc)) from exc

    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url.rstrip("/")
    if args.timeout is not None:
        overrides["timeout"] = args.timeout if args.timeout > 0 else None
    if args.buffered:
        overrides["strategy"] = TransferStrategy.BUFFERED
    return replace(config, **overrides) if overrides else config


def _select_file(source: Path) -> SelectedFile:
    if not source.exists():
        raise CLIError(f"file does not exist: {source}")
    if not source.is_file():
        raise CLIError(f"not a file: {source}")
    try:
        return SelectedFile.from_path(source)
    except OSError as exc:
        raise CLIError(f"cannot read {source}: {exc}") from exc


async def _run_upload(target: str, file: SelectedFile, config: UploadConfig) -> int:
    async with build_driver(config) as driver:
        controller = SessionController(
            target,
            driver,
            notifier=ConsoleNotifier(),
            eager_progress=config.eager_progress,
        )
        display = SessionProgressDisplay(file.name)
        display.attach(controller)

        controller.select_file(file)
        render_selected_file(file)
        if not controller.submit():
            raise CLIError(controller.validation_message or "upload could not be started")

        try:
            session = await controller.wait()
        except asyncio.CancelledError:
            # Ctrl-C: asyncio.run cancels this task; abort the transfer too.
            if not controller.cancel():
                logger.warning("Upload could not be aborted; the endpoint may still receive it")
            raise

    if session.state == SessionState.SUCCEEDED:
        return EXIT_OK
    if session.state == SessionState.CANCELLED:
        return EXIT_CANCELLED
    return EXIT_FAILED


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cat-up",
        description="Upload one file to the endpoint addressed by an upload link.",
    )
    parser.add_argument("link", nargs="?", help="Upload link or bare identifier")
    parser.add_argument("file", nargs="?", type=Path, help="File to upload")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Upload endpoint base URL (default from CAT_UPLOAD_BASE_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default from CAT_UPLOAD_TIMEOUT, none if unset)",
    )
    parser.add_argument(
        "--buffered",
        action="store_true",
        help="Send the file in one buffered request (no byte progress, no cancel)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR, or 'env' to use LOG_LEVEL)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cat-up {__version__}",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return EXIT_FAILED

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.link is None or args.file is None:
        parser.print_help()
        return EXIT_OK

    try:
        config = _resolve_config(args)
        target = resolve_upload_target(args.link, config.base_url)
        file = _select_file(Path(args.file).expanduser())
    except (CLIError, InvalidLinkError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FAILED

    render_configuration_summary(
        {
            "File": str(file.path),
            "Target": target,
            "Strategy": config.strategy.value,
            "Timeout": f"{config.timeout:g}s" if config.timeout else "none",
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(target, file, config))
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return EXIT_CANCELLED


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
