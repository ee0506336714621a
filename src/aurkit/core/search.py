"""
Anchored search queries.

The AUR RPC only does substring searches. A query may carry a leading
``^`` and/or trailing ``$`` anchor; the anchors are stripped before the
request and applied locally to the returned package names.
"""

import re
from dataclasses import dataclass

from aurkit.models.package import RpcResultSet


@dataclass(frozen=True)
class AnchoredQuery:
    """A search query split into the remote part and a local name filter."""

    query: str
    remote_query: str
    pattern: re.Pattern | None = None

    @classmethod
    def parse(cls, query: str) -> "AnchoredQuery":
        """
        Split anchors off a query.

        '^foo$' -> remote 'foo', pattern '^foo\\Z'
        'foo.bar$' -> remote 'foo.bar', pattern 'foo\\.bar\\Z'

        A trailing ``$`` becomes ``\\Z`` so a name with a trailing newline
        does not satisfy the end anchor.
        """
        head = query.startswith("^")
        tail = len(query) > int(head) and query.endswith("$")
        if not (head or tail):
            return cls(query=query, remote_query=query)

        literal = query[1 if head else 0 : len(query) - 1 if tail else len(query)]
        regexp = ("^" if head else "") + re.escape(literal) + (r"\Z" if tail else "")
        return cls(query=query, remote_query=literal, pattern=re.compile(regexp))

    @property
    def anchored(self) -> bool:
        return self.pattern is not None

    def matches(self, name: str) -> bool:
        return self.pattern is None or self.pattern.search(name) is not None

    def apply(self, results: RpcResultSet) -> RpcResultSet:
        """Keep only the results whose name matches the anchored pattern."""
        if self.pattern is None:
            return results
        return {name: record for name, record in results.items() if self.matches(name)}
