"""Shared helpers for settings components."""

from pathlib import Path

from decouple import AutoConfig

# Repository root: server/settings/components/__init__.py -> ../../..
BASE_DIR = Path(__file__).parent.parent.parent.parent

# Values come from the environment or from config/.env
config = AutoConfig(search_path=str(BASE_DIR.joinpath('config')))
