"""
AUR package handle.

An AURPackage keeps what is known up front (its name and RPC info record)
apart from the parsed PKGBUILD, which is loaded on first use and cached.
"""

import asyncio
import logging
import platform
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path

import aiofiles

from aurkit.core.errors import EmptyInputError
from aurkit.models.package import PkgbuildInfo, RpcRecord
from aurkit.parsers.pkgbuild import parse_pkgbuild

logger = logging.getLogger(__name__)

PkgbuildLoader = Callable[[], Awaitable[str]]


async def load_local_pkgbuild(path: Path) -> str:
    """
    Read a PKGBUILD from disk.

    Args:
        path: The PKGBUILD file, or a directory containing one.

    Raises:
        EmptyInputError: If the file does not exist.
    """
    path = Path(path)
    if path.is_dir():
        path = path / "PKGBUILD"
    if not path.is_file():
        raise EmptyInputError(f"No PKGBUILD at {path}")

    async with aiofiles.open(path) as f:
        return await f.read()


class AURPackage:
    """
    A package from the AUR.

    ``name`` and ``info`` are set on construction. The PKGBUILD is fetched
    through ``loader`` the first time get_pkgbuild() is awaited and never
    parsed again.
    """

    def __init__(
        self,
        name: str,
        loader: PkgbuildLoader,
        info: RpcRecord | None = None,
        strict: bool = True,
    ):
        self.name = name
        self.info = info or {}
        self._loader = loader
        self.strict = strict
        self._pkgbuild: PkgbuildInfo | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_path(cls, path: Path, name: str | None = None, strict: bool = True) -> "AURPackage":
        """Create a package backed by a local PKGBUILD (or its directory)."""
        path = Path(path)
        if name is None:
            # Relative paths like "PKGBUILD" or "." have no usable parent name.
            resolved = path.resolve()
            name = resolved.name if resolved.is_dir() else resolved.parent.name
        return cls(name=name, loader=partial(load_local_pkgbuild, path), strict=strict)

    @property
    def version(self) -> str | None:
        return self.info.get("version")

    @property
    def pkgbuild_loaded(self) -> bool:
        return self._pkgbuild is not None

    async def get_pkgbuild(self) -> PkgbuildInfo:
        """Load and parse the PKGBUILD once; later calls return the cache."""
        if self._pkgbuild is not None:
            return self._pkgbuild

        async with self._lock:
            if self._pkgbuild is None:
                text = await self._loader()
                self._pkgbuild = parse_pkgbuild(text, strict=self.strict)
                logger.debug(f"Loaded PKGBUILD for {self.name}")
        return self._pkgbuild

    async def package_filename(self, carch: str | None = None, pkgext: str = ".pkg.tar.zst") -> str:
        """
        Name of the package file makepkg would produce.

        Architecture-independent packages (``arch=('any')``) use ``any``;
        everything else uses ``carch``, defaulting to this machine.
        """
        pkgbuild = await self.get_pkgbuild()
        if not pkgbuild.pkgver or not pkgbuild.pkgrel:
            raise ValueError(f"PKGBUILD for {self.name} lacks pkgver or pkgrel")

        arch = pkgbuild.arch
        if arch == "any" or arch == ["any"]:
            arch = "any"
        else:
            arch = carch or platform.machine()

        return f"{self.name}-{pkgbuild.pkgver}-{pkgbuild.pkgrel}-{arch}{pkgext}"

    def __repr__(self) -> str:
        return f"AURPackage(name={self.name!r}, version={self.version!r})"
