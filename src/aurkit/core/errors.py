"""
Error types raised by the aurkit parsers and client.

Every exception carries an ErrorKind so callers can branch on the failure
category without matching on exception classes.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of an aurkit failure."""

    MALFORMED_DEPENDENCY = "malformed_dependency"
    UNBALANCED_DELIMITER = "unbalanced_delimiter"
    MALFORMED_RESPONSE = "malformed_response"
    REMOTE_ERROR = "remote_error"
    EMPTY_INPUT = "empty_input"
    TRANSPORT = "transport"
    CONFIG = "config"


class AURError(Exception):
    """Base class for all aurkit errors."""

    kind: ErrorKind


class ParseError(AURError):
    """Input was retrieved but could not be parsed."""


class MalformedDependencyError(ParseError):
    kind = ErrorKind.MALFORMED_DEPENDENCY

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"failed to parse depends string: {token!r}")


class UnbalancedDelimiterError(ParseError):
    kind = ErrorKind.UNBALANCED_DELIMITER

    def __init__(self, field: str, delimiter: str):
        self.field = field
        self.delimiter = delimiter
        super().__init__(f"unbalanced {delimiter!r} in value of field {field!r}")


class MalformedResponseError(ParseError):
    kind = ErrorKind.MALFORMED_RESPONSE


class RemoteError(AURError):
    """The RPC endpoint answered with an error envelope."""

    kind = ErrorKind.REMOTE_ERROR


class EmptyInputError(AURError):
    """Nothing could be retrieved (missing file, empty body, 404)."""

    kind = ErrorKind.EMPTY_INPUT


class TransportError(AURError):
    """The HTTP request failed after all retries."""

    kind = ErrorKind.TRANSPORT


class ConfigError(AURError):
    """A configuration setting has an unusable value."""

    kind = ErrorKind.CONFIG
