# src/docaudit/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for retrieving important package and user paths.
    """

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the 'docaudit' package (holds settings.json)."""
        return Path(__file__).resolve().parent.parent.parent

    @staticmethod
    def get_default_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    @staticmethod
    def get_working_dir() -> Path:
        """The directory reports are written to unless an explicit path is given."""
        return Path.cwd()

    @staticmethod
    def resolve_output_path(name: str) -> Path:
        """
        Absolute paths are kept, anything else is placed in the working directory.
        """
        path = Path(name).expanduser()
        if path.is_absolute():
            return path
        return PathUtils.get_working_dir() / path
