"""
zstar Configuration
Single source of truth for all settings.
Load once at startup, pass to all components.
"""
import copy
import json
from pathlib import Path
from .utils.logger import logger


# Default config values
DEFAULTS = {
    "compression": {
        "default_level": 3,
        "min_level": 1,
        "max_level": 19,
        "chunk_size_kb": 64,
        "threads": 0
    },
    "extraction": {
        "restrictive_charset": None,  # None = auto detect from host
        "default_file_mode": "0644",
        "default_dir_mode": "0755"
    },
    "storage": {
        "output_dir": "."
    }
}


class ZstarConfig:
    def __init__(self, config_path: str = None):
        self._config = copy.deepcopy(DEFAULTS)

        if config_path:
            self.config_path = Path(config_path)
        else:
            # Look for config in project root
            self.config_path = Path(__file__).parent.parent / 'zstar.config.json'

        if self.config_path.exists():
            self._load()
        else:
            logger.debug(f"No config file found at {self.config_path}, using defaults")

    def _load(self):
        """Load and merge config file over defaults"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            self._deep_merge(self._config, user_config)
            logger.info(f"Loaded config from {self.config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e}, using defaults")
        except OSError as e:
            logger.error(f"Failed to load config: {e}, using defaults")

    def save(self, path: str = None):
        """Save current config to file"""
        out_path = Path(path) if path else self.config_path
        with open(out_path, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)
        logger.info(f"Config saved to {out_path}")

    def get(self, *keys, default=None):
        """
        Get a nested config value by key path.
        e.g. config.get('compression', 'default_level')
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """
        Set a nested config value.
        e.g. config.set('compression', 'default_level', 10)
        """
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    # ── Convenience properties ─────────────────────────────────────────────

    @property
    def default_level(self) -> int:
        return int(self.get('compression', 'default_level', default=3))

    @property
    def min_level(self) -> int:
        return int(self.get('compression', 'min_level', default=1))

    @property
    def max_level(self) -> int:
        return int(self.get('compression', 'max_level', default=19))

    @property
    def chunk_size(self) -> int:
        return self.get('compression', 'chunk_size_kb', default=64) * 1024

    @property
    def threads(self) -> int:
        return self.get('compression', 'threads', default=0)

    @property
    def restrictive_charset(self):
        return self.get('extraction', 'restrictive_charset', default=None)

    @property
    def default_file_mode(self) -> int:
        return self._parse_mode(self.get('extraction', 'default_file_mode', default='0644'))

    @property
    def default_dir_mode(self) -> int:
        return self._parse_mode(self.get('extraction', 'default_dir_mode', default='0755'))

    @property
    def output_dir(self) -> str:
        return self.get('storage', 'output_dir', default='.')

    # ── Helpers ────────────────────────────────────────────────────────────

    @staticmethod
    def _parse_mode(value) -> int:
        # Modes are stored as octal strings in JSON ("0644")
        if isinstance(value, int):
            return value
        return int(str(value), 8)

    @staticmethod
    def _deep_merge(base: dict, override: dict):
        """Merge override into base recursively, modifies base in place"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ZstarConfig._deep_merge(base[key], value)
            else:
                base[key] = value


# Singleton, import this everywhere
config = ZstarConfig()

__all__ = ["ZstarConfig", "config"]
