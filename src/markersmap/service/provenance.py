"""Version of the generating tool, taken from the git checkout it runs in."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger("markersmap.service")


class ProvenanceError(Exception):
    """Raised when git cannot tell which version of the tool is running."""


def _git(args: list[str], cwd: Path | None) -> str:
    command = ["git", *args]
    try:
        completed = subprocess.run(
            command, cwd=cwd, capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ProvenanceError(f"'{' '.join(command)}' failed: {exc}") from exc
    if completed.stderr:
        raise ProvenanceError(
            f"'{' '.join(command)}' returned with stderr {completed.stderr.strip()}"
        )
    return completed.stdout.strip()


def tools_version(cwd: Path | None = None) -> str:
    """Tag pointing at HEAD, else the HEAD commit; ``+`` marks uncommitted changes."""
    version = _git(["tag", "--points-at", "HEAD"], cwd)
    if not version:
        version = _git(["rev-parse", "HEAD"], cwd)
    if not version:
        raise ProvenanceError("Could not determine the tool version from git")
    if _git(["status", "--porcelain=v2"], cwd):
        version = f"{version}+"
    logger.debug("Tool version from git: %s", version)
    return version
