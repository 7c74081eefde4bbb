# -*- coding: utf-8 -*-
"""Bootstrap helpers for CLI scripts run straight from a checkout."""

from __future__ import annotations

import sys
from importlib import import_module
from pathlib import Path


def _detect_repo_root() -> Path:
    """
    Walk up from this file looking for ``pyproject.toml`` or ``.git``.

    Falls back to the parent of the ``absence`` package directory.
    """

    here = Path(__file__).resolve()
    for p in [here] + list(here.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return here.parents[1]


def ensure_repo_on_path() -> Path:
    """
    Put the repository root at the front of ``sys.path`` (once) and check that
    ``absence`` imports.

    Returns
    -------
    Path
        The detected repository root.

    Raises
    ------
    ModuleNotFoundError
        If ``absence`` still cannot be imported after the root is added.
    """

    repo_root = _detect_repo_root()
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

    try:
        import_module("absence")
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise ModuleNotFoundError(
            "Failed to import 'absence' even after adding repo root to sys.path. "
            "Remove conflicting PYTHONPATH entries or install via 'pip install -e .'."
        ) from exc

    return repo_root


__all__ = ["ensure_repo_on_path"]
