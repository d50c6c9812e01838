import os
from pathlib import Path
from typing import List

from intranet.config import Settings


class ArtifactMissing(Exception):
    """The protected artifact is not on disk."""


class ArtifactUnreadable(Exception):
    """The protected artifact exists but cannot be read."""


def flag_path(settings: Settings) -> Path:
    return Path(settings.protected_dir) / settings.flag_filename


def open_artifact(path: Path) -> os.stat_result:
    """
    Check that the artifact can be served and return its stat result.

    The file is opened once so permission problems surface here, before
    any response headers go out.
    """
    if not path.is_file():
        raise ArtifactMissing(str(path))
    try:
        stat_result = path.stat()
        with path.open("rb"):
            pass
    except FileNotFoundError as exc:
        raise ArtifactMissing(str(path)) from exc
    except OSError as exc:
        raise ArtifactUnreadable(str(path)) from exc
    return stat_result


def load_employees(path: Path) -> List[str]:
    if not path.exists():
        return []
    return [line for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def search_employees(path: Path, query: str) -> List[str]:
    """Case-insensitive substring match over the employee directory."""
    needle = (query or "").strip().lower()
    return [name for name in load_employees(path) if needle in name.lower()]
