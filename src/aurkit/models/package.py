"""
AUR Package Models.

Defines the typed records produced from PKGBUILD metadata files and from
AUR RPC responses.
"""

from dataclasses import dataclass, field
from typing import Any

from aurkit.parsers.depends import DependencySpec


# A PKGBUILD value: a scalar string, or a list for parenthesised arrays.
FieldValue = str | list[str]

# Renamed RPC field name -> value, always containing "name".
RpcRecord = dict[str, Any]

# Package name -> record.
RpcResultSet = dict[str, RpcRecord]


@dataclass(frozen=True)
class PkgbuildInfo:
    """
    Parsed metadata block of a PKGBUILD.

    ``fields`` holds the recognised assignments exactly as extracted
    (``depends`` and ``conflicts`` always present). ``depends`` holds the
    same dependency tokens parsed into DependencySpec objects.
    """

    fields: dict[str, FieldValue]
    depends: list[DependencySpec] = field(default_factory=list)

    def get(self, name: str, default: Any = None) -> Any:
        if name == "depends":
            return self.depends
        return self.fields.get(name, default)

    def __getitem__(self, name: str) -> Any:
        if name == "depends":
            return self.depends
        return self.fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    @property
    def pkgname(self) -> FieldValue | None:
        return self.fields.get("pkgname")

    @property
    def pkgver(self) -> str | None:
        return self.fields.get("pkgver")

    @property
    def pkgrel(self) -> str | None:
        return self.fields.get("pkgrel")

    @property
    def arch(self) -> FieldValue | None:
        return self.fields.get("arch")

    @property
    def conflicts(self) -> list[str]:
        value = self.fields.get("conflicts", [])
        return [value] if isinstance(value, str) else value

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        data = dict(self.fields)
        data["depends"] = [spec.to_dict() for spec in self.depends]
        return data
