"""Runtime package: terminal session, event loop, and startup wiring."""

from __future__ import annotations


def run_navigator(*args, **kwargs):
    """Lazily import the session entrypoint to avoid package-import cycles."""
    from .app import run_navigator as _run_navigator

    return _run_navigator(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


__all__ = ["run_main_loop", "run_navigator"]
