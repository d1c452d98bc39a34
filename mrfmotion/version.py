"""Package version, with the git revision when running from a checkout."""
from __future__ import annotations

import subprocess
from pathlib import Path

__version__ = "0.1.0"


def git_revision() -> str | None:
    """Short hash of HEAD, suffixed with +dirty for uncommitted changes."""
    here = Path(__file__).resolve().parent
    try:
        head = subprocess.run(["git", "rev-parse", "--short", "HEAD"], cwd=here, capture_output=True, text=True)
        if head.returncode != 0:
            return None
        status = subprocess.run(["git", "status", "--porcelain"], cwd=here, capture_output=True, text=True)
    except OSError:
        return None
    rev = head.stdout.strip()
    if status.returncode == 0 and status.stdout.strip():
        rev += "+dirty"
    return rev


def get_version_string() -> str:
    rev = git_revision()
    return f"{__version__} ({rev})" if rev else __version__
