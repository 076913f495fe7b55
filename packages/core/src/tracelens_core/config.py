import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = ".tracelens.yml"

DEFAULT_CONFIG: dict = {
    "store": "http",  # "http" = evaluation service, "file" = JSON export served from memory
    "api_url": "http://127.0.0.1:8001",
    "api_key": None,
    "workspace_id": None,
    "traces_file": None,  # path to a JSON export, used when store is "file"
    "order": "desc",
    "failures_only": False,
    "show_summaries": True,
    "answer_timeout": 20,
    "notice_timeout": 2.5,
    "log_file": ".tracelens.log",
}

# Keys `tracelens config set` accepts. Anything else is a typo.
SETTABLE_KEYS = ("api_url", "api_key", "workspace_id", "store", "traces_file", "order", "failures_only", "show_summaries")
SECRET_KEYS = ("api_key",)


def load_config(config_path: str = DEFAULT_CONFIG_PATH, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .tracelens.yml (or the given path)
      3. CLI argument overrides
    then let EVAL_API_URL win over all of them for the service URL.
    Credentials are resolved separately (tracelens_cli.auth).
    """
    config = dict(DEFAULT_CONFIG)

    config.update(read_config_file(config_path))

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    env_url = os.environ.get("EVAL_API_URL")
    if env_url:
        config["api_url"] = env_url

    config["api_url"] = str(config["api_url"]).rstrip("/")
    return config


def read_config_file(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Return the raw file contents, or {} when missing or not a mapping."""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


def save_config_values(values: dict, config_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing = read_config_file(config_path)
    existing.update(values)
    _write(existing, config_path)


def remove_config_key(key: str, config_path: str = DEFAULT_CONFIG_PATH) -> bool:
    """Drop ``key`` from the config file. Returns False if it was not set."""
    existing = read_config_file(config_path)
    if key not in existing:
        return False
    del existing[key]
    _write(existing, config_path)
    return True


def parse_value(key: str, raw: str):
    """Coerce a command-line string for ``key`` to the type its default has."""
    default = DEFAULT_CONFIG.get(key)
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ValueError(f"{key} expects true or false, got {raw!r}")
    return raw


def mask(value: Optional[str]) -> Optional[str]:
    """Hide all but the ends of a secret: abc***xyz, or all stars when short."""
    if not value:
        return value
    if len(value) <= 6:
        return "*" * len(value)
    return f"{value[:3]}***{value[-3:]}"


def _write(data: dict, config_path: str) -> None:
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
