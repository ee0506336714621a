"""
AUR RPC Response Mapper.

Turns the JSON event stream of an AUR RPC response into package records
without building an intermediate JSON tree. Search responses can carry
thousands of entries, so values are written straight into their records
as the events arrive.

Event kinds follow a SAX-style tokenizer: objects and arrays are opened,
closed, keyed and filled with scalar values. ``iter_json_events`` adapts
``ijson.basic_parse`` to that sequence.
"""

import io
import logging
from enum import Enum, auto
from typing import Any, BinaryIO, Iterable, Iterator, NamedTuple

import ijson

from aurkit.core.errors import MalformedResponseError, RemoteError
from aurkit.core.search import AnchoredQuery
from aurkit.models.package import RpcRecord, RpcResultSet

logger = logging.getLogger(__name__)

RENAMED_KEYS = {
    "Description": "desc",
    "NumVotes": "votes",
    "CategoryID": "category",
    "LocationID": "location",
    "OutOfDate": "outdated",
}


class EventKind(Enum):
    ENTER_OBJECT = auto()
    ENTER_ARRAY = auto()
    CLOSE = auto()
    KEY = auto()
    VALUE = auto()


class JsonEvent(NamedTuple):
    """One parse event. CLOSE carries ``"object"`` or ``"array"``."""

    kind: EventKind
    value: Any = None


_IJSON_EVENTS = {
    "start_map": (EventKind.ENTER_OBJECT, None),
    "start_array": (EventKind.ENTER_ARRAY, None),
    "end_map": (EventKind.CLOSE, "object"),
    "end_array": (EventKind.CLOSE, "array"),
}


def iter_json_events(source: bytes | str | BinaryIO) -> Iterator[JsonEvent]:
    """
    Tokenize a JSON document into JsonEvent objects.

    Raises:
        MalformedResponseError: If the document is not valid JSON.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        for event, value in ijson.basic_parse(source, use_float=True):
            if event == "map_key":
                yield JsonEvent(EventKind.KEY, value)
            elif event in _IJSON_EVENTS:
                yield JsonEvent(*_IJSON_EVENTS[event])
            else:
                yield JsonEvent(EventKind.VALUE, value)
    except ijson.JSONError as e:
        raise MalformedResponseError(f"Invalid RPC response: {e}") from e


def rpc_keyname(key: str) -> str:
    """Normalize a provider field name."""
    return RENAMED_KEYS.get(key, key.lower())


def coerce_value(key: str, value: Any) -> Any:
    if key == "outdated":
        return str(value) == "1"
    return value


class _ResponseMapper:
    """
    Shared event handling for search and info responses.

    Depth 1 is the top-level container. When it is an object (the RPC
    envelope), its keys are tracked so that ``"type": "error"`` aborts the
    parse; envelope values are never written into a record. Subclasses
    decide which object opens the working record.
    """

    def __init__(self):
        self._depth = 0
        self._envelope_key: str | None = None
        self._error_message: str | None = None

        self._record: RpcRecord | None = None
        self._record_depth = 0
        self._key: str | None = None
        self._list: list | None = None

    def feed(self, event: JsonEvent) -> None:
        kind, value = event

        if kind is EventKind.KEY:
            if self._depth == 1:
                self._envelope_key = value
            elif self._record is not None and self._depth == self._record_depth:
                self._key = rpc_keyname(value)
        elif kind is EventKind.VALUE:
            self._on_value(value)
        elif kind is EventKind.CLOSE:
            self._on_close(value)
            self._depth -= 1
        else:
            self._depth += 1
            self._on_enter(kind)

    def _on_value(self, value: Any) -> None:
        if self._depth == 1 and self._envelope_key is not None:
            self._check_envelope(value)
            return

        if self._record is None:
            return

        if self._depth == self._record_depth and self._key is not None:
            self._store(self._key, value)
            self._key = None
        elif self._list is not None and self._depth == self._record_depth + 1:
            self._list.append(value)

    def _check_envelope(self, value: Any) -> None:
        if self._envelope_key == "error":
            self._error_message = value
        elif self._envelope_key == "type" and value == "error":
            message = self._error_message or "AUR RPC request failed"
            raise RemoteError(message)

    def _on_enter(self, kind: EventKind) -> None:
        if self._record is not None:
            # Arrays of scalars inside a record, e.g. Depends or License.
            if (
                kind is EventKind.ENTER_ARRAY
                and self._depth == self._record_depth + 1
                and self._key is not None
            ):
                self._list = []
                self._record[self._key] = self._list
                self._key = None
            return

        if kind is EventKind.ENTER_OBJECT and self._opens_record():
            self._record = {}
            self._record_depth = self._depth
            self._key = None
        elif kind is EventKind.ENTER_ARRAY:
            self._enter_array()

    def _on_close(self, kind: str) -> None:
        if self._record is not None:
            if kind == "array" and self._depth == self._record_depth + 1:
                self._list = None
            elif kind == "object" and self._depth == self._record_depth:
                self._finish_record()
                self._record = None
                self._key = None
            return

        if kind == "array":
            self._leave_array()

    def _store(self, key: str, value: Any) -> None:
        self._record[key] = coerce_value(key, value)

    def _opens_record(self) -> bool:
        raise NotImplementedError

    def _enter_array(self) -> None:
        pass

    def _leave_array(self) -> None:
        pass

    def _finish_record(self) -> None:
        pass


class SearchResultMapper(_ResponseMapper):
    """
    Builds a name-indexed result set from a search response.

    The first array outside a record is the result collection; every object
    directly inside it is one package. A record is filed under its name the
    moment the ``name`` value arrives, so fields before and after ``name``
    land in the same record.
    """

    def __init__(self):
        super().__init__()
        self.results: RpcResultSet = {}
        self.in_results = False
        self._collection_depth = 0

    @property
    def in_record(self) -> bool:
        return self._record is not None

    def _enter_array(self) -> None:
        if not self.in_results:
            self.in_results = True
            self._collection_depth = self._depth

    def _leave_array(self) -> None:
        if self.in_results and self._depth == self._collection_depth:
            self.in_results = False

    def _opens_record(self) -> bool:
        return self.in_results and self._depth == self._collection_depth + 1

    def _store(self, key: str, value: Any) -> None:
        if key == "name":
            self.results[value] = self._record
        super()._store(key, value)


class InfoResultMapper(_ResponseMapper):
    """
    Extracts the single record of an info response.

    The record is the envelope's ``results`` object, or the first object
    of a ``results`` array (RPC v5).
    """

    def __init__(self):
        super().__init__()
        self.record: RpcRecord | None = None
        self._results_array = False

    def _enter_array(self) -> None:
        if self._depth == 2 and self._envelope_key == "results":
            self._results_array = True

    def _leave_array(self) -> None:
        if self._depth == 2:
            self._results_array = False

    def _opens_record(self) -> bool:
        if self.record is not None or self._envelope_key != "results":
            return False
        if self._depth == 2:
            return True
        return self._results_array and self._depth == 3

    def _finish_record(self) -> None:
        self.record = self._record


def map_search_response(
    events: Iterable[JsonEvent], query: str | None = None
) -> RpcResultSet:
    """
    Map search response events to a result set.

    Args:
        events: JSON parse events of the response body.
        query: The user's query; anchored queries (``^foo``, ``foo$``)
            filter the result names.

    Raises:
        RemoteError: If the envelope reports ``"type": "error"``.
    """
    mapper = SearchResultMapper()
    for event in events:
        mapper.feed(event)

    results = mapper.results
    if query is not None:
        results = AnchoredQuery.parse(query).apply(results)
    logger.debug(f"Mapped {len(results)} search results")
    return results


def map_info_response(events: Iterable[JsonEvent]) -> RpcRecord | None:
    """
    Map info response events to a single record.

    Returns:
        The package record, or None if the response holds no result.

    Raises:
        RemoteError: If the envelope reports ``"type": "error"``.
    """
    mapper = InfoResultMapper()
    for event in events:
        mapper.feed(event)
    return mapper.record
