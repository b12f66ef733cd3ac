# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "chronicle"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

PLACEHOLDER_REMOTE_URL = "YOUR_SUPABASE_URL"
PLACEHOLDER_REMOTE_ANON_KEY = "YOUR_SUPABASE_ANON_KEY"

REMOTE_URL_ENV = "CHRONICLE_REMOTE_URL"
REMOTE_ANON_KEY_ENV = "CHRONICLE_REMOTE_ANON_KEY"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_MIGRATE_PATH: Path = DATA_PATH / "migrate.yaml"
DATA_ENTRIES_DIR: Path = DATA_PATH / "entries"
DATA_STORE_META_PATH: Path = DATA_PATH / "store.yaml"
DATA_KEY_VALUE_PATH: Path = DATA_PATH / "local_storage.json"
DATA_SESSION_PATH: Path = DATA_PATH / "session.yaml"
DATA_DIVERGENCE_PATH: Path = DATA_PATH / "divergence.yaml"
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"


class Configuration(TypedDict):
    remote_url: Optional[str]
    remote_anon_key: Optional[str]
    data_path: Optional[str]
    show_header: bool
    log_level: str
    voice_language: str
    voice_max_restarts: int
    voice_restart_delay: float
    magic_link_redirect: NotRequired[Optional[str]]


class RemoteCredentials(TypedDict):
    url: str
    anon_key: str


def get_default_configuration() -> Configuration:
    return {
        "remote_url": PLACEHOLDER_REMOTE_URL,
        "remote_anon_key": PLACEHOLDER_REMOTE_ANON_KEY,
        "data_path": None,
        "show_header": True,
        "log_level": "WARNING",
        "voice_language": "en-US",
        "voice_max_restarts": 5,
        "voice_restart_delay": 0.1,
        "magic_link_redirect": None,
    }


def set_data_path(data_path: Path) -> None:
    global \
        DATA_PATH, \
        DATA_MIGRATE_PATH, \
        DATA_ENTRIES_DIR, \
        DATA_STORE_META_PATH, \
        DATA_KEY_VALUE_PATH, \
        DATA_SESSION_PATH, \
        DATA_DIVERGENCE_PATH, \
        DATA_ID_MAP_PATH

    DATA_PATH = data_path
    DATA_MIGRATE_PATH = DATA_PATH / "migrate.yaml"
    DATA_ENTRIES_DIR = DATA_PATH / "entries"
    DATA_STORE_META_PATH = DATA_PATH / "store.yaml"
    DATA_KEY_VALUE_PATH = DATA_PATH / "local_storage.json"
    DATA_SESSION_PATH = DATA_PATH / "session.yaml"
    DATA_DIVERGENCE_PATH = DATA_PATH / "divergence.yaml"
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are instantiated.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return

    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))


def resolve_remote_credentials(config: Configuration) -> Optional[RemoteCredentials]:
    """
    Return the remote service credentials, or None when the app should run
    in local-only mode.

    Environment variables take precedence over the config file. Empty values
    and the shipped placeholders count as "not configured".
    """
    url = os.environ.get(REMOTE_URL_ENV) or config.get("remote_url")
    anon_key = os.environ.get(REMOTE_ANON_KEY_ENV) or config.get("remote_anon_key")

    if not url or not anon_key:
        return None
    if url == PLACEHOLDER_REMOTE_URL or anon_key == PLACEHOLDER_REMOTE_ANON_KEY:
        return None
    return {"url": url.rstrip("/"), "anon_key": anon_key}
