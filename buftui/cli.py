"""Command-line front door for buftui.

Parses options, resolves the startup reference and credentials, builds the
session configuration, then hands over to the interactive runtime.
"""

from __future__ import annotations

import argparse
import sys

from .errors import CredentialError, LocatorError
from .reference import LOCATOR_FORM, Locator, resolve
from .registry.transport import DEFAULT_TIMEOUT_SECONDS
from .render.highlight import normalize_style
from .runtime import run_navigator
from .runtime.config import (
    DEFAULT_REMOTE,
    DEFAULT_STYLE,
    NavigatorConfig,
    load_style_name,
    load_theme_name,
    load_time_view,
    save_style_name,
    save_theme_name,
)
from .runtime.credentials import resolve_credentials
from .runtime.logs import configure_logging
from .ui_theme import available_theme_names, resolve_theme


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buftui",
        description="Browse owners, modules, commits, and files on a Buf Schema Registry.",
    )
    parser.add_argument("--remote", default=None, help=f"Registry remote host (default: {DEFAULT_REMOTE}).")
    parser.add_argument(
        "-r",
        "--reference",
        default="",
        help=f"Start at a reference of the form {LOCATOR_FORM}.",
    )
    parser.add_argument("-u", "--username", default=None, help="Registry username (requires --token).")
    parser.add_argument("-t", "--token", default=None, help="Registry token (requires --username).")
    parser.add_argument("-f", "--fullscreen", action="store_true", help="Use the alternate screen.")
    parser.add_argument("--style", default=None, help=f"Pygments style for file contents (default: {DEFAULT_STYLE}).")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"Per-request deadline in seconds (default: {DEFAULT_TIMEOUT_SECONDS:g}).",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: $BUFTUI_LOG_LEVEL or WARNING).")
    return parser


def resolve_startup(reference: str, remote_flag: str | None) -> tuple[str, Locator | None]:
    """Return the session remote and optional startup locator.

    Raises ``LocatorError`` for bad references and ``ValueError`` for an
    empty or conflicting remote.
    """
    if remote_flag is not None and not remote_flag.strip():
        raise ValueError("remote must not be empty")
    ref_remote, locator = resolve(reference)
    if ref_remote is not None and remote_flag is not None and ref_remote != remote_flag:
        raise ValueError(f"--remote {remote_flag} conflicts with reference remote {ref_remote}")
    remote = ref_remote or remote_flag or DEFAULT_REMOTE
    return remote, locator


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the navigator.

    Startup problems and sessions that end in the errored state exit with
    status 1 and an ``error: <message>`` line on stderr.
    """
    args = build_parser().parse_args(argv)

    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc

    try:
        remote, locator = resolve_startup(args.reference, args.remote)
        credentials = resolve_credentials(remote, args.username, args.token)
    except (LocatorError, CredentialError, ValueError) as exc:
        raise SystemExit(f"error: {exc}") from exc

    if not _is_interactive():
        raise SystemExit("error: buftui needs an interactive terminal")

    if args.theme is not None:
        save_theme_name(args.theme)
    if args.style is not None:
        save_style_name(args.style)
    theme_name = args.theme if args.theme is not None else load_theme_name()
    style = normalize_style(args.style if args.style is not None else load_style_name())

    config = NavigatorConfig(
        remote=remote,
        fetch_timeout=args.timeout,
        theme=resolve_theme(theme_name, no_color=args.no_color),
        style=style,
        no_color=args.no_color,
        time_view=load_time_view(),
        fullscreen=args.fullscreen,
    )
    result = run_navigator(config, credentials, locator)
    if result.exit_code:
        raise SystemExit(f"error: {result.error}")
