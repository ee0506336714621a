"""
aurkit - Arch User Repository client.

Queries the AUR RPC interface and parses PKGBUILD metadata files into
typed records.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "AURClient":
        from aurkit.core.client import AURClient

        return AURClient
    if name == "AURPackage":
        from aurkit.core.package import AURPackage

        return AURPackage
    if name == "ClientConfig":
        from aurkit.core.config import ClientConfig

        return ClientConfig
    if name == "parse_pkgbuild":
        from aurkit.parsers.pkgbuild import parse_pkgbuild

        return parse_pkgbuild
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["AURClient", "AURPackage", "ClientConfig", "parse_pkgbuild", "__version__"]
