"""Configuration loading/saving for launchpad-agent.

Settings come from a JSON file (default ~/.launchpad-agent.json, or the path in
LAUNCHPAD_AGENT_CONFIG) and are then overridden by environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from .claude_api import DEFAULT_BASE_URL, DEFAULT_MODEL
from .executor import MAX_ITERATIONS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.launchpad-agent.json")
CONFIG_PATH_ENV = "LAUNCHPAD_AGENT_CONFIG"

# setting name -> environment variable
ENV_VARS: dict[str, str] = {
    "api_key": "ANTHROPIC_API_KEY",
    "model": "LAUNCHPAD_MODEL",
    "max_tokens": "LAUNCHPAD_MAX_TOKENS",
    "base_url": "LAUNCHPAD_BASE_URL",
    "timeout": "LAUNCHPAD_TIMEOUT",
    "max_iterations": "LAUNCHPAD_MAX_ITERATIONS",
}


def config_path(env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    return os.path.expanduser(env.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load config from disk. Returns empty dict if not found or invalid."""
    path = path or config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: Mapping[str, Any], path: str | None = None) -> None:
    """Persist config to disk."""
    path = path or config_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dict(config), f, indent=2)


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _positive_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _non_empty_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


_PARSERS = {
    "api_key": _non_empty_str,
    "model": _non_empty_str,
    "base_url": _non_empty_str,
    "max_tokens": _positive_int,
    "max_iterations": _positive_int,
    "timeout": _positive_float,
}


@dataclass
class AgentSettings:
    """Resolved settings for the client and agent loop.

    Invalid values in the file or environment are ignored and the default is
    kept.
    """

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_tokens: int = 4096
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 120.0
    max_iterations: int = MAX_ITERATIONS
    denied_segments: list[str] = field(default_factory=list)

    def _update(self, values: Mapping[str, Any], source: str) -> None:
        for name, parse in _PARSERS.items():
            if name not in values:
                continue
            parsed = parse(values[name])
            if parsed is None:
                logger.warning("Ignoring invalid %s from %s", name, source)
                continue
            setattr(self, name, parsed)

    @classmethod
    def load(
        cls,
        path: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "AgentSettings":
        """Build settings from the config file, then the environment."""
        env = os.environ if env is None else env
        settings = cls()

        data = load_config(path or config_path(env))
        settings._update(data, "config file")
        denied = data.get("denied_segments")
        if isinstance(denied, list):
            settings.denied_segments = [s for s in denied if isinstance(s, str) and s]

        overrides = {
            name: env[var] for name, var in ENV_VARS.items() if env.get(var)
        }
        settings._update(overrides, "environment")
        return settings

    def to_dict(self) -> dict[str, Any]:
        """Serializable form, without the API key."""
        data = asdict(self)
        data.pop("api_key")
        return data
