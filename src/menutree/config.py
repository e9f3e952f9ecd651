"""Configuration constants for menutree."""

import os
from pathlib import Path

# API token location. First file found is used.
API_TOKEN_FILES: list[Path] = [
    Path("~/.config/menutree-token.txt").expanduser(),
    Path("~/.config/secret/menutree-token.txt").expanduser(),
]

# Base URL of the admin menu API (tRPC-style procedures are appended).
API_BASE_URL: str = os.environ.get("MENUTREE_API_URL", "http://localhost:3000/trpc")

# Seconds before an HTTP call to the menu API is abandoned.
REQUEST_TIMEOUT: float = float(os.environ.get("MENUTREE_TIMEOUT", "10"))

# Directory with the local menu database. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/menutree").expanduser(),
    Path("~/.menutree").expanduser(),
]

DATABASE_FILENAME: str = "menus.db"

# Menu group used when none is given.
DEFAULT_SCOPE: str = "main"


def resolve_data_directory() -> Path:
    """Return the data directory: $MENUTREE_DATA_DIR, else the first existing candidate."""
    env_dir = os.environ.get("MENUTREE_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
