"""Helpers for calling external collaborators.

Any failure inside a collaborator surfaces as a CollaboratorError (or a
subclass), so callers can tell "the registry is down" apart from "there is no
pool".
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from connector.errors import CollaboratorError, ConnectorError, MalformedResponseError

logger = structlog.get_logger()

T = TypeVar("T")


def call_collaborator(
    collaborator: str,
    operation: str,
    fn: Callable[..., T],
    *args: object,
    error_cls: type[CollaboratorError] = CollaboratorError,
    **kwargs: object,
) -> T:
    """Invoke fn, converting foreign exceptions to error_cls.

    Connector errors raised by the collaborator (e.g. a web3 binding that
    already raised CollaboratorError) pass through unchanged.
    """
    try:
        return fn(*args, **kwargs)
    except ConnectorError:
        raise
    except Exception as e:
        logger.warning(
            "collaborator_call_failed",
            collaborator=collaborator,
            operation=operation,
            error=str(e),
        )
        raise error_cls(collaborator, operation, str(e)) from e


def expect_uint(collaborator: str, operation: str, value: object) -> int:
    """Validate that a collaborator returned a non-negative int."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedResponseError(collaborator, operation, f"expected uint, got {value!r}")
    return value


def expect_amounts(collaborator: str, operation: str, value: object) -> list[int]:
    """Validate that a collaborator returned a sequence of non-negative ints."""
    if not isinstance(value, (list, tuple)):
        raise MalformedResponseError(collaborator, operation, f"expected amounts, got {value!r}")
    return [expect_uint(collaborator, operation, v) for v in value]
