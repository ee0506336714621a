"""
PKGBUILD Parser.

Extracts package metadata from Arch User Repository (AUR) PKGBUILDs
using regex-based scanning of the bash-like format. Assignments are found
in two phases: bare words first, then quoted strings and parenthesised
arrays, the later phase winning on the same name.
"""

import logging
import re

from aurkit.core.errors import EmptyInputError, UnbalancedDelimiterError
from aurkit.models.package import FieldValue, PkgbuildInfo
from aurkit.parsers.depends import parse_dependencies

logger = logging.getLogger(__name__)

PKGBUILD_FIELDS = (
    "pkgname",
    "pkgver",
    "pkgrel",
    "pkgdesc",
    "url",
    "license",
    "install",
    "changelog",
    "source",
    "noextract",
    "md5sums",
    "sha1sums",
    "sha256sums",
    "sha384sums",
    "sha512sums",
    "groups",
    "arch",
    "backup",
    "depends",
    "makedepends",
    "optdepends",
    "conflicts",
    "provides",
    "replaces",
    "options",
)

_RECOGNIZED = frozenset(PKGBUILD_FIELDS)

# Applied in this order; a later pass overwrites an earlier one.
DELIMITERS = (('"', '"'), ("'", "'"), ("(", ")"))

_BARE_ASSIGNMENT = re.compile(r"([a-z0-9]+)=(\w\S*)")
_ASSIGNMENT_PREFIX = re.compile(r"([a-z0-9]+)=")


def unquote_bash(quoted: str) -> FieldValue:
    """
    Strip bash quoting from a raw value.

    Parenthesised arrays are split on whitespace and each word is unquoted
    on its own, so a quoted word containing spaces comes apart:
    ``('a b' c)`` gives ``["'a", "b'", "c"]``. A value wrapped in one pair
    of double or single quotes loses exactly that pair. Escape sequences
    are not interpreted.
    """
    if len(quoted) >= 2 and quoted[0] == "(" and quoted[-1] == ")":
        return [unquote_bash(word) for word in quoted[1:-1].split()]

    for quote in ('"', "'"):
        if len(quoted) >= 2 and quoted[0] == quote and quoted[-1] == quote:
            return quoted[1:-1]

    return quoted


def _balanced_end(content: str, start: int, opener: str, closer: str) -> int | None:
    """Return the index just past the span opened at ``content[start]``."""
    depth = 1
    for i in range(start + 1, len(content)):
        char = content[i]
        if char == closer:
            depth -= 1
            if depth == 0:
                return i + 1
        elif char == opener:
            depth += 1
    return None


def _delimited_assignments(content: str, opener: str, closer: str):
    """Yield (name, span) for every ``name=`` followed by a balanced span."""
    pos = 0
    while True:
        match = _ASSIGNMENT_PREFIX.search(content, pos)
        if not match:
            return

        name, start = match.group(1), match.end()
        pos = start
        if not content.startswith(opener, start):
            continue

        end = _balanced_end(content, start, opener, closer)
        if end is None:
            if name in _RECOGNIZED:
                raise UnbalancedDelimiterError(name, opener)
            continue

        yield name, content[start:end]
        pos = end


def extract_fields(content: str) -> dict[str, FieldValue]:
    """
    Extract the recognised field assignments of a PKGBUILD.

    Args:
        content: Raw PKGBUILD text content.

    Returns:
        Mapping of field name to unquoted value. ``depends`` and
        ``conflicts`` default to empty lists.

    Raises:
        UnbalancedDelimiterError: If a recognised field opens a quote or
            parenthesis that is never closed.
    """
    raw: dict[str, FieldValue] = {}

    # First find all fields without quoting characters...
    for match in _BARE_ASSIGNMENT.finditer(content):
        raw[match.group(1)] = match.group(2)

    # ...then let quoted strings and arrays override them.
    for opener, closer in DELIMITERS:
        for name, span in _delimited_assignments(content, opener, closer):
            raw[name] = unquote_bash(span)

    fields = {name: value for name, value in raw.items() if name in _RECOGNIZED}
    fields.setdefault("depends", [])
    fields.setdefault("conflicts", [])
    return fields


def parse_pkgbuild(content: str | None, strict: bool = True) -> PkgbuildInfo:
    """
    Parse PKGBUILD content into a PkgbuildInfo.

    Args:
        content: Raw PKGBUILD text content.
        strict: Raise on malformed dependency tokens instead of skipping them.

    Raises:
        EmptyInputError: If there is no text to parse.
        UnbalancedDelimiterError: See extract_fields.
        MalformedDependencyError: If ``strict`` and a depends entry is invalid.
    """
    if not content or not content.strip():
        raise EmptyInputError("PKGBUILD is empty")

    fields = extract_fields(content)
    depends = parse_dependencies(fields["depends"], strict=strict)
    logger.debug(f"Parsed PKGBUILD {fields.get('pkgname')!r}: {len(fields)} fields")
    return PkgbuildInfo(fields=fields, depends=depends)
