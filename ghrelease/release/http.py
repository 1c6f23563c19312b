"""Shared HTTP transport for a release run.

One ``httpx.AsyncClient`` (and so one connection pool) serves the creation
call and every concurrent upload. Tests inject an ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx

from ghrelease import __version__
from ghrelease.release.model import ReleaseSpec

__all__ = [
    "USER_AGENT",
    "HttpTransport",
    "MockReleaseAPI",
    "auth_headers",
    "describe_request",
    "describe_response",
    "status_line",
]

USER_AGENT = f"ghrelease/{__version__}"
REDACTED = "(not shown)"


def auth_headers(spec: ReleaseSpec) -> dict[str, str]:
    """Headers sent with every API request."""
    return {
        "User-Agent": USER_AGENT,
        "Authorization": f"token {spec.token}",
        "Accept": spec.accept_header,
    }


def describe_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    *,
    body: str,
) -> str:
    """Trace text for a request with the Authorization value replaced."""
    lines = [f"{method} {url}"]
    for key, value in headers.items():
        shown = REDACTED if key.lower() == "authorization" else value
        lines.append(f" > {key}: {shown}")
    lines.append(f" > body: {body}")
    return "\n".join(lines)


def status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".rstrip()


def describe_response(response: httpx.Response) -> str:
    lines = [f"< {status_line(response)}"]
    lines.extend(f"< {key}: {value}" for key, value in response.headers.items())
    return "\n".join(lines)


class HttpTransport:
    """Async context manager owning the pooled client for one run."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> HttpTransport:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._client.__aexit__(exc_type, exc, tb)

    async def post(
        self,
        url: str,
        *,
        content: bytes,
        headers: Mapping[str, str],
    ) -> httpx.Response:
        """POST and read the full response body.

        Raises:
            httpx.TransportError: On connection, DNS or timeout failures.
        """
        return await self._client.post(url, content=content, headers=dict(headers))


class MockReleaseAPI:
    """In-memory releases API for tests.

    Pass ``api.transport`` to ``publish``/``run``. Every request is recorded;
    creation answers with an ``upload_url`` template on ``UPLOAD_HOST`` and
    uploads answer 201 unless ``upload_statuses`` says otherwise.

    Usage:
        api = MockReleaseAPI(upload_statuses={"broken.txt": 422})
        run(spec, console=MockConsole(), transport=api.transport)
        assert len(api.upload_requests) == len(spec.assets)
    """

    UPLOAD_HOST = "uploads.example.test"
    UPLOAD_BASE = f"https://{UPLOAD_HOST}/releases/1/assets"

    def __init__(
        self,
        *,
        create_status: int = 201,
        create_body: bytes | None = None,
        upload_statuses: Mapping[str, int] | None = None,
    ) -> None:
        self.create_status = create_status
        self.create_body = create_body
        self.upload_statuses = dict(upload_statuses or {})
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def create_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host != self.UPLOAD_HOST]

    @property
    def upload_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == self.UPLOAD_HOST]

    def create_json(self) -> Any:
        """Decoded body of the single creation request."""
        (request,) = self.create_requests
        return json.loads(request.content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == self.UPLOAD_HOST:
            return self._handle_upload(request)
        if self.create_body is not None:
            return httpx.Response(self.create_status, content=self.create_body)
        if self.create_status >= 300:
            return httpx.Response(self.create_status, json={"message": "Bad credentials"})
        return httpx.Response(
            self.create_status,
            json={
                "id": 1,
                "upload_url": self.UPLOAD_BASE + "{?name,label}",
                "assets": [],
            },
        )

    def _handle_upload(self, request: httpx.Request) -> httpx.Response:
        asset_name = request.url.params.get("name", "")
        status = self.upload_statuses.get(asset_name, 201)
        if status >= 300:
            return httpx.Response(status, json={"message": "Validation Failed"})
        return httpx.Response(status, json={"name": asset_name, "state": "uploaded"})
