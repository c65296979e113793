from __future__ import annotations

import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Make ``termotype`` importable when this file is run directly by path."""
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # Works when executed as a module: python -m termotype
    from .app import run  # type: ignore[attr-defined]
    from .settings import Settings  # type: ignore[attr-defined]
except ImportError:
    # Works when executed as a script (absolute path, IDE "Run File", etc.)
    _ensure_repo_root_on_path()
    from termotype.app import run  # type: ignore[attr-defined]
    from termotype.settings import Settings  # type: ignore[attr-defined]


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main() -> int:
    """Entry point for running the typing test from the command line."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    return run(settings=settings)


if __name__ == "__main__":
    raise SystemExit(main())
