"""Environment-driven settings.

``BIOPLANES_LOG_LEVEL``
    Level of the stderr log sink installed by :func:`configure_logging`
    (default ``WARNING``).
``BIOPLANES_READER``
    bioio reader plugin module used to open datasets, e.g. ``bioio_ome_tiff``
    (default: bioio picks the plugin by file extension).
``JAVA_HOME``
    Needed by bioformats-backed bioio plugins. :func:`configure_java` fills it
    in from the local Java installation when unset.
"""

import os
import platform
import shutil
import sys
from typing import Optional

from loguru import logger

DEFAULT_LOG_LEVEL = "WARNING"


def get_log_level():
    # type: () -> str
    return os.environ.get("BIOPLANES_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def get_reader_plugin():
    # type: () -> Optional[str]
    return os.environ.get("BIOPLANES_READER") or None


def configure_logging(level=None):
    # type: (str) -> None
    """Replace loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_log_level()).upper())


def find_java_home():
    # type: () -> str
    """Locate a Java installation, or None if there is none."""
    java_home = os.environ.get("JAVA_HOME")
    if java_home and os.path.exists(java_home):
        return java_home

    java_binary = "java.exe" if platform.system() == "Windows" else "java"
    java_exe = shutil.which("java")
    if java_exe:
        # .../jdk-XX/bin/java after resolving symlinks
        candidate = os.path.dirname(os.path.dirname(os.path.realpath(java_exe)))
        if os.path.exists(os.path.join(candidate, "bin", java_binary)):
            return candidate

    if platform.system() == "Windows":
        for base_path in (r"C:\Program Files\Java", r"C:\Program Files (x86)\Java"):
            if not os.path.isdir(base_path):
                continue
            for folder in sorted(os.listdir(base_path)):
                candidate = os.path.join(base_path, folder)
                if os.path.exists(os.path.join(candidate, "bin", java_binary)):
                    return candidate

    return None


def configure_java():
    # type: () -> bool
    """Set ``JAVA_HOME`` if it is missing. Returns whether Java is available."""
    if os.environ.get("JAVA_HOME"):
        return True
    java_home = find_java_home()
    if java_home:
        os.environ["JAVA_HOME"] = java_home
        logger.debug(f"Auto-detected JAVA_HOME: {java_home}")
        return True
    logger.warning("Could not auto-detect Java, bioformats-backed readers may not work")
    return False
