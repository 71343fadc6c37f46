"""Persistent JSON config and session-state helpers.

Stores the execution-strategy switch, deletion confirmation and trash location.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir, user_state_dir

APP_NAME = "lazyops"
CONFIG_FILENAME = "config.json"
SESSION_STATE_FILENAME = "session.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
SESSION_STATE_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / SESSION_STATE_FILENAME
DEFAULT_TRASH_DIR = Path(user_data_dir(APP_NAME, appauthor=False)) / "Trash"


@dataclass(frozen=True)
class OpsConfig:
    """Settings consulted by the dispatcher and the signal layer."""

    use_system_calls: bool = False
    confirm_deletion: bool = True
    trash_dir: Path = DEFAULT_TRASH_DIR
    reinstate_interrupt_toggles: bool = False
    log_level: str = "WARNING"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    """Only explicit booleans are accepted; anything else yields ``default``."""
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_trash_dir(data: dict[str, object]) -> Path:
    value = data.get("trash_dir")
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_TRASH_DIR
    return Path(value.strip()).expanduser()


def _load_log_level(data: dict[str, object]) -> str:
    value = data.get("log_level")
    if not isinstance(value, str):
        return OpsConfig.log_level
    stripped = value.strip().upper()
    if stripped not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return OpsConfig.log_level
    return stripped


def load_ops_config() -> OpsConfig:
    """Build an ``OpsConfig`` from persisted values, sanitizing each field."""
    data = load_config()
    return OpsConfig(
        use_system_calls=_load_bool(data, "use_system_calls", OpsConfig.use_system_calls),
        confirm_deletion=_load_bool(data, "confirm_deletion", OpsConfig.confirm_deletion),
        trash_dir=_load_trash_dir(data),
        reinstate_interrupt_toggles=_load_bool(
            data,
            "reinstate_interrupt_toggles",
            OpsConfig.reinstate_interrupt_toggles,
        ),
        log_level=_load_log_level(data),
    )


def save_use_system_calls(use_system_calls: bool) -> None:
    """Persist the native/shell strategy switch as a boolean."""
    config = load_config()
    config["use_system_calls"] = bool(use_system_calls)
    save_config(config)


def save_confirm_deletion(confirm_deletion: bool) -> None:
    """Persist whether permanent deletion asks for confirmation."""
    config = load_config()
    config["confirm_deletion"] = bool(confirm_deletion)
    save_config(config)


def load_session_state() -> dict[str, object]:
    """Load the last persisted session state, ``{}`` when unavailable."""
    try:
        data = json.loads(SESSION_STATE_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_session_state(state: dict[str, object]) -> None:
    """Persist session state with a ``saved_at`` timestamp.

    Errors are ignored: this runs on the shutdown path where nothing else can
    be done about a failing disk.
    """
    payload = dict(state)
    payload["saved_at"] = time.time()
    try:
        SESSION_STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
        SESSION_STATE_PATH.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass
