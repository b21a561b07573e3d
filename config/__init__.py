"""Configuration management."""
import os
import yaml
from pathlib import Path

_config = None
_DEFAULT_CONFIG = Path(__file__).parent / "default_config.yaml"


def load_config(path=None):
    """Load config from YAML, merging defaults with optional overrides."""
    global _config

    with open(_DEFAULT_CONFIG) as f:
        config = yaml.safe_load(f)

    if path and Path(path).exists():
        with open(path) as f:
            overrides = yaml.safe_load(f) or {}
        config = _deep_merge(config, overrides)

    # Environment variable overrides
    env_map = {
        "GROQ_API_KEY": (("advisory", "api_key"), str),
        "NEWS_API_KEY": (("news", "api_key"), str),
        "SIGNALSCAN_ADVISORY_MODEL": (("advisory", "model"), str),
        "SIGNALSCAN_BATCH_SIZE": (("orchestrator", "batch_size"), int),
        "SIGNALSCAN_ITEM_TIMEOUT": (("orchestrator", "item_timeout"), float),
        "SIGNALSCAN_LOG_LEVEL": (("logging", "level"), str),
    }
    for env_key, (config_path, cast) in env_map.items():
        val = os.environ.get(env_key)
        if val:
            d = config
            for k in config_path[:-1]:
                d = d.setdefault(k, {})
            try:
                d[config_path[-1]] = cast(val)
            except ValueError:
                raise ValueError(f"{env_key} must be {cast.__name__}, got {val!r}")

    _validate_config(config)
    _config = config
    return config


def get_config():
    """Return cached config, loading defaults if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _deep_merge(base, override):
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate_config(config):
    """Basic config validation."""
    required_sections = ["api", "news", "advisory", "orchestrator", "logging"]
    for section in required_sections:
        if section not in config:
            raise ValueError(f"Missing required config section: {section}")

    orch = config["orchestrator"]
    if orch["batch_size"] < 1:
        raise ValueError("orchestrator.batch_size must be >= 1")
    if orch["item_timeout"] <= 0:
        raise ValueError("orchestrator.item_timeout must be > 0")
    if not 0 <= orch["high_confidence"] <= 100:
        raise ValueError("orchestrator.high_confidence must be within 0-100")
