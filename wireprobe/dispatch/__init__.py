"""
Dispatch package for wireprobe.

Re-exports the dispatcher interfaces, the concrete dispatchers and the
name-based registry used by the CLI and settings.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from wireprobe.dispatch.abstract import AbstractDispatcher, ConnectionHandler, Dispatcher
from wireprobe.dispatch.inline import InlineDispatcher
from wireprobe.dispatch.threaded import ThreadDispatcher


def _dispatcher_factories() -> Dict[str, Callable[[], Dispatcher]]:
    """Registry of available dispatchers."""
    return {
        "inline": lambda: InlineDispatcher(),
        "thread": lambda: ThreadDispatcher(),
    }


def available_dispatchers() -> List[str]:
    """List available dispatcher names."""
    return sorted(_dispatcher_factories().keys())


def resolve_dispatcher(name: str) -> Dispatcher:
    """Build a fresh dispatcher by name."""
    factories = _dispatcher_factories()
    if name not in factories:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


__all__ = [
    # Abstracts
    "AbstractDispatcher",
    "ConnectionHandler",
    "Dispatcher",
    # Concrete dispatchers
    "InlineDispatcher",
    "ThreadDispatcher",
    # Registry
    "available_dispatchers",
    "resolve_dispatcher",
]
