"""Connect unary transport over a shared ``httpx.Client``.

Speaks the Connect protocol with JSON bodies: one POST per call to
``https://<remote>/<service>/<method>``. The client handle is shared by all
fetch workers; ``httpx.Client`` is safe for concurrent use.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

import httpx

from ..errors import FetchFailure, ProtocolError

logger = logging.getLogger(__name__)

CONNECT_PROTOCOL_VERSION = "1"
DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "buftui"


class ConnectTransport:
    """Issue Connect JSON unary calls against one registry remote."""

    def __init__(
        self,
        remote: str,
        *,
        username: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
        scheme: str = "https",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.remote = remote
        self.timeout = timeout
        self._clock = clock
        self.base_url = f"{scheme}://{remote}"
        auth = httpx.BasicAuth(username, token) if username and token else None
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(
            auth=auth,
            headers={"User-Agent": USER_AGENT},
        )
        if client is not None and auth is not None:
            self._client.auth = auth

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ConnectTransport:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def call(self, service: str, method: str, request: dict) -> dict:
        """Invoke ``service/method`` with ``request`` and return decoded JSON.

        The whole exchange, body included, must finish within ``timeout``
        seconds. Network errors, timeouts, and Connect error responses raise
        ``FetchFailure``; undecodable bodies raise ``ProtocolError``.
        """
        url = f"{self.base_url}/{service}/{method}"
        headers = {
            "Content-Type": "application/json",
            "Connect-Protocol-Version": CONNECT_PROTOCOL_VERSION,
            "Connect-Timeout-Ms": str(max(1, int(self.timeout * 1000))),
        }
        logger.debug("POST %s", url)
        deadline = self._clock() + self.timeout
        try:
            with self._client.stream(
                "POST",
                url,
                content=json.dumps(request).encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            ) as response:
                status_code = response.status_code
                body = bytearray()
                for chunk in response.iter_bytes():
                    body.extend(chunk)
                    if self._clock() > deadline:
                        raise self._deadline_exceeded(method)
                if self._clock() > deadline:
                    raise self._deadline_exceeded(method)
        except httpx.TimeoutException as exc:
            raise self._deadline_exceeded(method) from exc
        except httpx.HTTPError as exc:
            raise FetchFailure(f"{method}: {exc}", code="unavailable") from exc

        if status_code != 200:
            raise _connect_error(method, status_code, bytes(body))

        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise ProtocolError(f"{method}: response is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise ProtocolError(f"{method}: expected JSON object, got {type(payload).__name__}")
        return payload

    def _deadline_exceeded(self, method: str) -> FetchFailure:
        return FetchFailure(f"{method}: deadline of {self.timeout:g}s exceeded", code="deadline_exceeded")


def _connect_error(method: str, status_code: int, content: bytes) -> FetchFailure:
    """Build a ``FetchFailure`` from a Connect error response."""
    code: str | None = None
    message = ""
    try:
        body = json.loads(content)
    except ValueError:
        body = None
    if isinstance(body, dict):
        raw_code = body.get("code")
        raw_message = body.get("message")
        code = raw_code if isinstance(raw_code, str) else None
        message = raw_message if isinstance(raw_message, str) else ""
    if code is None:
        code = f"http_{status_code}"
    detail = f"{code}: {message}" if message else code
    logger.warning("%s failed with HTTP %s (%s)", method, status_code, detail)
    return FetchFailure(f"{method}: {detail}", code=code)
