from __future__ import annotations

from pathlib import Path


def app_base_dir() -> Path:
    """
    Returns the repository root.

    Running from source: .../src/booking_automation/config/paths.py -> repo root is 3 parents up
    """
    return Path(__file__).resolve().parents[3]


def env_file_path() -> Path:
    return app_base_dir() / ".env"


def resolve_path(value: str | Path) -> Path:
    """Relative paths in settings are relative to the repository root."""
    p = Path(value)
    if p.is_absolute():
        return p
    return app_base_dir() / p
