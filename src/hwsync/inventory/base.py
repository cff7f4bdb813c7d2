"""Helpers shared by the capability services."""

from collections.abc import Callable
from typing import TypeVar

from hwsync.core.errors import NotFoundCountError, UpstreamError
from hwsync.inventory.models import ListResponse

T = TypeVar("T")


def call_upstream(message: str, fn: Callable[..., T], *args) -> T:
    """Invoke a raw API call, wrapping any failure as UpstreamError.

    ``message`` describes the operation; the cause is appended after a colon.
    """
    try:
        return fn(*args)
    except Exception as err:
        raise UpstreamError(f"{message}: {err}") from err


def exactly_one(response: ListResponse[T], message: str) -> T:
    """Return the single result, or raise NotFoundCountError.

    ``message`` is completed with the observed count.
    """
    if response.count != 1 or not response.results:
        raise NotFoundCountError(f"{message}: {response.count}", count=response.count)
    return response.results[0]
