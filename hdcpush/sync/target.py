"""Push target definition."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..config import DEFAULT_PACKAGE_DIR


@dataclass
class PushTarget:
    """A build tree to push to one device.

    Examples:
        >>> target = PushTarget("7001005458323933328a", "/work/oh")
        >>> target.package_root
        PosixPath('/work/oh/packages/phone')
    """

    connect_key: str
    """Connection key of the target device"""

    build_dir: Union[Path, str]
    """Root of the build tree"""

    package_dir: str = DEFAULT_PACKAGE_DIR
    """Package mirror directory, relative to build_dir"""

    push: bool = False
    """Send without asking for confirmation"""

    force: bool = False
    """Also select files modified exactly at the watermark"""

    def __post_init__(self) -> None:
        if isinstance(self.build_dir, str):
            self.build_dir = Path(self.build_dir)

    @property
    def package_root(self) -> Path:
        """Location of the package mirror."""
        return Path(self.build_dir) / self.package_dir
