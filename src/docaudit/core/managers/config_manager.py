# src/docaudit/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from docaudit.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    A singleton class to manage the application's raw configuration.
    It loads settings from a JSON file and allows for in-memory modifications.

    Domain code never reads from here; the application converts the
    configuration once into an immutable AuditSettings object.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.config_path: Optional[Path] = None
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def _section(self, keys: List[str], create: bool = False) -> Optional[Dict[str, Any]]:
        """Follows `keys` down the nested dictionaries; None if the path is not a dictionary."""
        node: Any = self._config
        for key in keys:
            if create and isinstance(node, dict):
                node = node.setdefault(key, {})
            else:
                node = node.get(key) if isinstance(node, dict) else None
            if not isinstance(node, dict):
                return None
        return node

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key, e.g. 'probe.timeout'."""
        *parents, leaf = key_path.split('.')
        section = self._section(parents)
        if section is None or section.get(leaf) is None:
            return default
        return section[leaf]

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a dotted key in the in-memory configuration.
        The new value is cast to the type of the value it replaces when possible.
        """
        *parents, leaf = key_path.split('.')
        section = self._section(parents, create=True)
        if section is None:
            logger.error("Cannot set '%s': a parent key is not a dictionary.", key_path)
            return False

        if section.get(leaf) is not None:
            value = self._cast_like(section[leaf], value, key_path)

        section[leaf] = value
        logger.debug("Configuration updated: %s = %s", key_path, value)
        return True

    @staticmethod
    def _cast_like(original: Any, value: Any, key_path: str) -> Any:
        if isinstance(original, bool) and isinstance(value, str):
            # bool('false') would be True
            return value.strip().lower() in ("1", "true", "yes", "on")
        try:
            return type(original)(value)
        except (ValueError, TypeError):
            logger.warning(
                "Could not cast new value for '%s' to type %s. Storing as given.",
                key_path, type(original).__name__
            )
            return value

    def reset(self, config_path: Optional[Union[str, Path]] = None):
        """
        (Re)loads the configuration from disk.
        Without a path the last loaded file is used, initially the packaged settings.json.
        A missing or unreadable file results in an empty configuration.
        """
        if config_path is not None:
            self.config_path = Path(config_path)
        elif self.config_path is None:
            self.config_path = PathUtils.get_default_settings_file()

        try:
            if not self.config_path.exists():
                logger.warning("Settings file not found at %s. Using empty config.", self.config_path)
                self._config = {}
                return
            with open(self.config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.debug("Configuration has been (re)loaded from %s.", self.config_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s", self.config_path, e)
            self._config = {}


# The global singleton instance used by the application entry point.
config_manager = ConfigManager()
