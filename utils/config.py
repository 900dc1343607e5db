import json
from copy import deepcopy
from pathlib import Path

from utils.logging_setup import get_logger

logger = get_logger("config")


DEFAULT_CONFIG = {
    "resx": {
        "extension": ".resx",
        "designer_suffix": ".Designer.cs",
        "backup_enabled": True,
    },
    "languages": {
        "culture_allow_list": ["en-US", "de-DE"],
    },
    "workers": {
        "max_workers": 4,
    },
    "logging": {
        "level": "INFO",
    },
}


class ConfigManager:
    CONFIGS_DIR_LOC = Path(__file__).parent.parent / "configs"

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else ConfigManager.CONFIGS_DIR_LOC
        self.default_config_path = self.config_dir / "default_config.json"
        self.user_config_path = self.config_dir / "user_config.json"
        self.config = self.load_config()

    def _load_json(self, path):
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load config {path}: {e}")
            return {}
        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring config {path}: top level is not an object")
            return {}
        return loaded

    def load_config(self):
        """Load configuration from files, merging user config over defaults.

        Built-in defaults sit underneath both files so a missing or broken
        config directory still yields a usable configuration.
        """
        default_config = self.merge_configs(DEFAULT_CONFIG, self._load_json(self.default_config_path))
        user_config = self._load_json(self.user_config_path)
        return self.merge_configs(default_config, user_config)

    def merge_configs(self, default, user):
        """Recursively merge user config with default config."""
        merged = deepcopy(default)

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def save_user_config(self, config):
        """Save user configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.user_config_path, 'w', encoding="utf-8") as f:
                json.dump(config, f, indent=4)
            self.config = self.load_config()
            return True
        except OSError as e:
            logger.error(f"Error saving user config: {e}")
            return False

    def get(self, key, default=None):
        """Get a configuration value using dot notation."""
        try:
            value = self.config
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key, value):
        """Set a configuration value using dot notation and persist it."""
        user_config = self._load_json(self.user_config_path)
        keys = key.split('.')
        current = user_config

        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value
        return self.save_user_config(user_config)
