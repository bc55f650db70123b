"""CLI argument parsing and main entry point.

Provides three commands:

* ``hangar-dashboard tui``              launch the Textual dashboard.
* ``hangar-dashboard logs PROJECT_ID``   print classified container logs.
* ``hangar-dashboard status PROJECT_ID`` print the project run-state once.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.config import HangarConfig, find_config_file, load_hangar_config
from hangar_dashboard.constants import (
    APP_NAME,
    DEFAULT_LOG_LEVEL,
    SERVER_VERSION,
    SUPPORTED_LANGUAGES,
)
from hangar_dashboard.dashboard.logs import parse_logs
from hangar_dashboard.display.logging_config import secret_redaction_filter, setup_logging
from hangar_dashboard.errors import ApiError, ConfigurationError
from hangar_dashboard.i18n import Translator

module_logger = logging.getLogger(__name__)


# ── Configuration layering ───────────────────────────────────────────────


def resolve_config_path(cli_path: Optional[str]) -> Optional[str]:
    """``--config`` → ``HANGAR_CONFIG`` → ``hangar.yaml``/``hangar.yml`` in CWD."""
    return cli_path or os.environ.get("HANGAR_CONFIG") or find_config_file()


def apply_overrides(
    config: HangarConfig,
    *,
    server: Optional[str] = None,
    token: Optional[str] = None,
    language: Optional[str] = None,
) -> HangarConfig:
    """Layer env vars, then CLI flags, over the file configuration.

    CLI flag → env var → config file → default.
    """
    client_updates = {}

    env_server = os.environ.get("HANGAR_SERVER")
    env_token = os.environ.get("HANGAR_TOKEN")
    env_lang = os.environ.get("HANGAR_LANG")
    if env_lang and env_lang not in SUPPORTED_LANGUAGES:
        module_logger.warning("Ignoring unsupported HANGAR_LANG '%s'", env_lang)
        env_lang = None

    if server or env_server:
        client_updates["server_url"] = (server or env_server or "").strip().rstrip("/")
    if token or env_token:
        client_updates["token"] = token or env_token
    if language or env_lang:
        client_updates["language"] = language or env_lang

    if not client_updates:
        return config
    client = config.client.model_copy(update=client_updates)
    return config.model_copy(update={"client": client})


def _load_config(args: argparse.Namespace) -> HangarConfig:
    try:
        config = load_hangar_config(resolve_config_path(args.config))
    except ConfigurationError as e_cfg:
        print(f"Configuration error: {e_cfg}", file=sys.stderr)
        sys.exit(1)
    config = apply_overrides(config, server=args.server, token=args.token, language=args.lang)
    if config.client.token:
        secret_redaction_filter.register(config.client.token)
    return config


# ── ``hangar-dashboard tui`` ─────────────────────────────────────────────


def _cmd_tui(args: argparse.Namespace) -> None:
    """Entry-point for ``hangar-dashboard tui``."""
    setup_logging(args.log_level, quiet=True)
    config = _load_config(args)

    from hangar_dashboard.tui.app import HangarApp

    try:
        HangarApp(config, project_id=args.project, open_database=args.database).run()
    except KeyboardInterrupt:
        module_logger.info("%s TUI interrupted by KeyboardInterrupt.", APP_NAME)
    finally:
        module_logger.info("%s TUI finished.", APP_NAME)


# ── Headless commands ────────────────────────────────────────────────────


async def _print_logs(config: HangarConfig, project_id: int) -> None:
    async with ApiClient(config.client.server_url, config.client.token) as client:
        text = await client.get_project_logs(project_id)
    lines = parse_logs(text)
    if not lines:
        print(Translator(config.client.language).t("project_dashboard.logs_empty"))
        return
    for line in lines:
        print(f"{line.display_timestamp:<19s}  {line.level.value.upper():<5s}  {line.message}")


async def _print_status(config: HangarConfig, project_id: int) -> None:
    i18n = Translator(config.client.language)
    async with ApiClient(config.client.server_url, config.client.token) as client:
        status = await client.get_project_status(project_id)
    print(i18n.status(status) if status is not None else i18n.t("common.status_unknown"))


def _run_headless(args: argparse.Namespace, coro_fn) -> None:
    setup_logging(args.log_level, quiet=True)
    config = _load_config(args)
    try:
        asyncio.run(coro_fn(config, args.project_id))
    except ApiError as e_api:
        i18n = Translator(config.client.language)
        print(f"{i18n.error(e_api)} ({e_api})", file=sys.stderr)
        sys.exit(1)


def _cmd_logs(args: argparse.Namespace) -> None:
    """Entry-point for ``hangar-dashboard logs``."""
    _run_headless(args, _print_logs)


def _cmd_status(args: argparse.Namespace) -> None:
    """Entry-point for ``hangar-dashboard status``."""
    _run_headless(args, _print_status)


# ── Parser ───────────────────────────────────────────────────────────────


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--server",
        type=str,
        default=None,
        metavar="URL",
        help="Hangar server URL (or set HANGAR_SERVER)",
    )
    common.add_argument(
        "--token",
        type=str,
        default=None,
        help="Bearer token for the Hangar API (or set HANGAR_TOKEN)",
    )
    common.add_argument(
        "--lang",
        type=str,
        default=None,
        choices=list(SUPPORTED_LANGUAGES),
        help="Interface language (or set HANGAR_LANG)",
    )
    common.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to configuration file (YAML). Default: auto-detect hangar.yaml/hangar.yml",
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set file logging level (default: info)",
    )
    return common


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with tui/logs/status subcommands."""
    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} v{SERVER_VERSION}",
    )
    common = _common_options()
    subparsers = parser.add_subparsers(dest="command")

    # ── tui ─────────────────────────────────────────────────────
    sp_tui = subparsers.add_parser(
        "tui",
        parents=[common],
        help="Launch the Textual dashboard",
    )
    target = sp_tui.add_mutually_exclusive_group()
    target.add_argument(
        "--project",
        type=int,
        default=None,
        metavar="ID",
        help="Open the dashboard of this project directly",
    )
    target.add_argument(
        "--database",
        action="store_true",
        default=False,
        help="Open the personal database dashboard directly",
    )
    sp_tui.set_defaults(func=_cmd_tui)

    # ── logs ────────────────────────────────────────────────────
    sp_logs = subparsers.add_parser(
        "logs",
        parents=[common],
        help="Print the container logs of a project",
    )
    sp_logs.add_argument("project_id", type=int, metavar="PROJECT_ID")
    sp_logs.set_defaults(func=_cmd_logs)

    # ── status ──────────────────────────────────────────────────
    sp_status = subparsers.add_parser(
        "status",
        parents=[common],
        help="Print the run-state of a project",
    )
    sp_status.add_argument("project_id", type=int, metavar="PROJECT_ID")
    sp_status.set_defaults(func=_cmd_status)

    return parser


def main() -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    else:
        args.func(args)
