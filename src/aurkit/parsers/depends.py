"""
Dependency Specifier Parser.

Parses the entries of a PKGBUILD ``depends`` array, e.g. ``glib2`` or
``gtk3>=3.24``, into structured comparator specs.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from aurkit.core.errors import MalformedDependencyError

logger = logging.getLogger(__name__)

_BARE_NAME = re.compile(r"[a-z0-9_-]+")
_VERSIONED = re.compile(r"([a-z0-9_-]+)(<=|>=|=|<|>)([a-z0-9._-]+)")


class Comparator(Enum):
    """Version comparator of a dependency."""

    NONE = ""
    EQ = "="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


@dataclass(frozen=True)
class DependencySpec:
    """A single parsed dependency token."""

    package: str
    comparator: Comparator = Comparator.NONE
    version: str | None = None
    raw: str = ""

    @property
    def is_versioned(self) -> bool:
        return self.comparator is not Comparator.NONE

    def __str__(self) -> str:
        return f"{self.package}{self.comparator.value}{self.version or ''}"

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "comparator": self.comparator.value or None,
            "version": self.version,
            "raw": self.raw,
        }


def parse_dependency(token: str) -> DependencySpec:
    """
    Parse one dependency token.

    Args:
        token: A ``NAME`` or ``NAME<cmp>VERSION`` string.

    Returns:
        The parsed DependencySpec.

    Raises:
        MalformedDependencyError: If the token matches neither grammar.
    """
    if _BARE_NAME.fullmatch(token):
        return DependencySpec(package=token, raw=token)

    match = _VERSIONED.fullmatch(token)
    if not match:
        raise MalformedDependencyError(token)

    package, comparator, version = match.groups()
    return DependencySpec(
        package=package,
        comparator=Comparator(comparator),
        version=version,
        raw=token,
    )


def parse_dependencies(tokens: list[str] | str, strict: bool = True) -> list[DependencySpec]:
    """
    Parse a list of dependency tokens.

    A scalar is treated as a one-element list. With ``strict=False``,
    malformed tokens are logged and skipped instead of raising.
    """
    if isinstance(tokens, str):
        tokens = [tokens]

    specs = []
    for token in tokens:
        try:
            specs.append(parse_dependency(token))
        except MalformedDependencyError as e:
            if strict:
                raise
            logger.warning(f"Skipping dependency: {e}")
    return specs
