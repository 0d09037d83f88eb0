"""Passive bearer-credential capture from the host application's own traffic.

The observer sits in front of the host's outbound call path (an httpx event
hook or a decorator around an async send callable). It reads each request's
headers, hands the first bearer ``Authorization`` value to the shared
``CredentialContext`` and otherwise stays out of the way: requests are never
blocked, delayed or modified.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from archive_recovery.auth.credential import CredentialContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTHORIZATION_HEADER = "authorization"
BEARER_SCHEME = "bearer"


def _header_from_mapping(headers: Mapping[Any, Any], key: str) -> Any:
    if isinstance(headers, httpx.Headers):
        return headers.get(key)
    for name, value in headers.items():
        if isinstance(name, bytes):
            name = name.decode("latin-1")
        if str(name).lower() == key:
            return value
    return None


def _read_authorization(source: Any) -> Any:
    headers = getattr(source, "headers", source)
    if headers is None:
        return None
    if isinstance(headers, Mapping):
        return _header_from_mapping(headers, AUTHORIZATION_HEADER)
    if isinstance(headers, (list, tuple)):
        return _header_from_mapping(dict(headers), AUTHORIZATION_HEADER)
    getter = getattr(headers, "get", None)
    if callable(getter):
        return getter("Authorization") or getter(AUTHORIZATION_HEADER)
    return None


def is_bearer(value: str) -> bool:
    scheme, _, token = value.strip().partition(" ")
    return scheme.lower() == BEARER_SCHEME and bool(token.strip())


def extract_bearer(source: Any) -> str | None:
    """Return the bearer ``Authorization`` value carried by *source*, if any.

    *source* may be a plain header mapping, a list of header pairs, an
    ``httpx.Headers``, or any request-like object exposing ``.headers``.
    Header names are matched case-insensitively and unreadable shapes yield
    ``None`` rather than an error.
    """
    try:
        value = _read_authorization(source)
    except Exception as exc:
        logger.debug("credential_header_unreadable", extra={"error_type": type(exc).__name__})
        return None
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    if not isinstance(value, str) or not is_bearer(value):
        return None
    return value


class CredentialObserver:
    """Transparent interceptor that feeds a ``CredentialContext``."""

    def __init__(self, context: CredentialContext) -> None:
        self.context = context

    def observe(self, source: Any = None, *, headers: Any = None) -> bool:
        """Inspect one outgoing request.

        Explicit ``headers`` are checked before the request object itself,
        mirroring ``fetch(resource, {headers})``. Never raises.

        Returns:
            True if this call captured the credential.
        """
        if self.context.ready:
            return False
        value = extract_bearer(headers) if headers is not None else None
        if value is None and source is not None:
            value = extract_bearer(source)
        if value is None:
            return False
        return self.context.set_once(value)

    async def event_hook(self, request: httpx.Request) -> None:
        """httpx ``AsyncClient`` request hook."""
        self.observe(request)

    def sync_event_hook(self, request: httpx.Request) -> None:
        """httpx ``Client`` request hook."""
        self.observe(request)

    def install(self, client: httpx.AsyncClient | httpx.Client) -> httpx.AsyncClient | httpx.Client:
        """Attach the observer to an existing httpx client's request hooks.

        Installing twice on the same client is a no-op.
        """
        hook = self.event_hook if isinstance(client, httpx.AsyncClient) else self.sync_event_hook
        hooks = dict(client.event_hooks)
        request_hooks = list(hooks.get("request", []))
        if hook not in request_hooks:
            request_hooks.append(hook)
        hooks["request"] = request_hooks
        client.event_hooks = hooks
        logger.debug("credential_observer_installed", extra={"client": type(client).__name__})
        return client

    def wrap(self, send: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Decorate an async send callable so every call is observed first.

        The wrapped callable receives exactly the original arguments and its
        result (or exception) is passed through untouched.
        """

        @functools.wraps(send)
        async def _observed(*args: Any, **kwargs: Any) -> T:
            self.observe(args[0] if args else None, headers=kwargs.get("headers"))
            return await send(*args, **kwargs)

        return _observed
