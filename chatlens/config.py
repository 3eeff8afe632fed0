"""
chatlens/config.py
Engine configuration. Persists to chatlens_config.json.
Everything installation-specific (target app, screen class names, view ids,
contact title patterns) lives here so the heuristics stay generic.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern

from chatlens import widgets
from chatlens.errors import ConfigError
from chatlens.patterns import DEFAULT_CONTACT_PATTERNS, compile_contact_patterns

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "chatlens_config.json"

DEFAULT_CONFIG = {
    "target_package": "com.whatsapp",
    "conversation_class": "com.whatsapp.Conversation",
    "contact_name_view_id": "com.whatsapp:id/conversation_contact_name",
    "calls_tab_description": "Calls",
    "message_list_class": widgets.LIST_VIEW,
    "call_list_class": widgets.RECYCLER_VIEW,
    "contact_patterns": list(DEFAULT_CONTACT_PATTERNS),
    "detect_active_calls": True,
    "log_level": "INFO",
}


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from chatlens_config.json. Returns defaults if missing."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load an explicit config file. Unlike load_config, a bad file is an error."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must hold a JSON object")
    return {**DEFAULT_CONFIG, **data}


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to chatlens_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load or create config. Writes the defaults on first use so the
    installation-specific values are easy to find and edit.
    """
    path = _config_path(project_root)
    config = load_config(project_root)
    if not path.exists():
        save_config(config, project_root)
        logger.info(f"Wrote default config: {path}")
    return config


@dataclass
class EngineSettings:
    """Typed view of the config dict, as consumed by the engine."""
    target_package:        str           = DEFAULT_CONFIG["target_package"]
    conversation_class:    str           = DEFAULT_CONFIG["conversation_class"]
    contact_name_view_id:  str           = DEFAULT_CONFIG["contact_name_view_id"]
    calls_tab_description: str           = DEFAULT_CONFIG["calls_tab_description"]
    message_list_class:    str           = DEFAULT_CONFIG["message_list_class"]
    call_list_class:       str           = DEFAULT_CONFIG["call_list_class"]
    contact_patterns:      List[Pattern] = field(
        default_factory=lambda: compile_contact_patterns(DEFAULT_CONTACT_PATTERNS)
    )
    detect_active_calls:   bool          = True
    log_level:             str           = DEFAULT_CONFIG["log_level"]

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "EngineSettings":
        merged = {**DEFAULT_CONFIG, **(config or {})}

        for key in ("target_package", "conversation_class", "contact_name_view_id",
                    "calls_tab_description", "message_list_class", "call_list_class"):
            if not isinstance(merged[key], str) or not merged[key]:
                raise ConfigError(f"'{key}' must be a non-empty string")

        patterns = merged["contact_patterns"]
        if isinstance(patterns, str) or not isinstance(patterns, (list, tuple)):
            raise ConfigError("'contact_patterns' must be a list of regular expressions")
        try:
            compiled = compile_contact_patterns(patterns)
        except (re.error, TypeError) as e:
            raise ConfigError(f"Bad contact pattern: {e}") from e

        log_level = str(merged["log_level"]).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown log_level: {merged['log_level']}")

        return cls(
            target_package        = merged["target_package"],
            conversation_class    = merged["conversation_class"],
            contact_name_view_id  = merged["contact_name_view_id"],
            calls_tab_description = merged["calls_tab_description"],
            message_list_class    = merged["message_list_class"],
            call_list_class       = merged["call_list_class"],
            contact_patterns      = compiled,
            detect_active_calls   = bool(merged["detect_active_calls"]),
            log_level             = log_level,
        )
