# app/config.py
"""
Runtime configuration, read from the environment (and a local .env file).
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# repo_root/app/config.py -> repo_root
REPO_ROOT = Path(__file__).resolve().parent.parent


def find_data_dir(repo_root: Path, cwd: Path) -> Path:
    """
    data/ next to the sources (checkout or editable install), otherwise
    data/ under the working directory (regular `pip install .`).
    """
    source_data = repo_root / "data"
    if source_data.is_dir():
        return source_data
    return cwd / "data"


DATA_DIR = find_data_dir(REPO_ROOT, Path.cwd())

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0"))

AGREEMENTS_PATH = Path(
    os.getenv("AGREEMENTS_PATH", str(DATA_DIR / "transfer_agreements.json"))
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
