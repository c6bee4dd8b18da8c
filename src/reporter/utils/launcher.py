import logging
import os
import platform
import subprocess
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def open_report(report_path: Union[str, Path]) -> bool:
    """
    Opens the report in the user's default viewer.

    Returns:
        bool: True if a viewer was launched. Failure is logged, never raised.
    """
    path = Path(report_path).resolve()
    if not path.exists():
        logger.warning("Cannot open report, %s does not exist.", path)
        return False

    try:
        system = platform.system()

        if system == "Windows":
            # Windows: hand the file to its registered application
            os.startfile(str(path))

        elif system == "Darwin":  # macOS
            subprocess.Popen(["open", str(path)])

        else:
            # Linux and other unix-likes
            subprocess.Popen(
                ["xdg-open", str(path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )

        logger.debug("Opened report %s in the default viewer.", path)
        return True

    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Could not open report %s: %s", path, e)
        return False
