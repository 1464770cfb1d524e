"""Configuration constants and working directory resolution."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Build subtrees that may contain artifacts installed on the device
SCAN_DIRS: tuple[str, ...] = (
    "applications",
    "arkcompiler",
    "base",
    "build",
    "commonlibrary",
    "cpp",
    "developtools",
    "device",
    "domains",
    "drivers",
    "foundation",
    "isa",
    "kernel",
    "libpandabase",
    "out",
    "test",
    "third_party",
    "vendor",
    "communication",
    "multimedia",
    "distributedhardware",
)

RECORD_FILE = "build_record.json"
WORKDIR_NAME = "hdc_push_buildfiles"

# Mirror of the device filesystem layout, relative to the build root
DEFAULT_PACKAGE_DIR = "packages/phone"

DEFAULT_HDC = "hdc"


def resolve_workdir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve and create the working directory holding the record file.

    Uses ``$XDG_CONFIG_HOME`` when set, otherwise ``$HOME/.config``.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Path to the existing working directory

    Raises:
        ConfigError: If neither variable is set or the directory can't be created
    """
    if environ is None:
        environ = os.environ

    config_home = environ.get("XDG_CONFIG_HOME")
    if not config_home:
        home = environ.get("HOME")
        if not home:
            raise ConfigError(
                "Cannot locate configuration directory: "
                "neither XDG_CONFIG_HOME nor HOME is set"
            )
        config_home = str(Path(home) / ".config")

    workdir = Path(config_home) / WORKDIR_NAME
    try:
        workdir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create working directory {workdir}: {e}") from e

    logger.debug(f"Working directory: {workdir}")
    return workdir


def get_record_path(workdir: Path) -> Path:
    """Get the record file location inside a working directory."""
    return workdir / RECORD_FILE
