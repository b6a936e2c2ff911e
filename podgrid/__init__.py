"""Schema-driven cell resolution for the pod observation grid."""

from __future__ import annotations

from pathlib import Path

APP_ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = APP_ROOT / "config"

__version__ = "0.1.0"

__all__ = ["APP_ROOT", "CONFIG_DIR", "__version__"]
