from __future__ import annotations

import json

import httpx

from ghrelease.core.result import Err, Ok, Result
from ghrelease.core.structured import as_str_dict, get_str
from ghrelease.output.console import ConsoleProtocol
from ghrelease.release.errors import ReleaseError
from ghrelease.release.http import (
    HttpTransport,
    auth_headers,
    describe_request,
    describe_response,
    status_line,
)
from ghrelease.release.model import ReleaseSpec, UploadEndpoint
from ghrelease.release.payload import encode_payload, release_payload

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def api_failure(
    *,
    method: str,
    url: str,
    response: httpx.Response,
    console: ConsoleProtocol,
    trace: str,
) -> ReleaseError:
    """Report a non-2xx (or bodiless) response and build its error.

    The response body goes into ``detail`` only; ``print_release_error`` shows it.
    """
    line = status_line(response)
    body = response.text
    console.error(f"Got status {line} for {trace}")
    return ReleaseError(
        kind="api",
        message=f"{method} {url} -> {line}",
        detail=body or None,
    )


def transport_failure(*, method: str, url: str, exc: httpx.TransportError) -> ReleaseError:
    return ReleaseError(
        kind="transport",
        message=f"{method} {url} failed: {str(exc) or type(exc).__name__}",
        hint="check network access and the configured base URL",
    )


def parse_upload_url(response: httpx.Response) -> str | None:
    """Return ``upload_url`` from a creation response, if well-formed."""
    try:
        data_obj: object = json.loads(response.content.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    data = as_str_dict(data_obj)
    if data is None:
        return None
    return get_str(data, "upload_url")


async def create_release(
    http: HttpTransport,
    spec: ReleaseSpec,
    *,
    console: ConsoleProtocol,
) -> Result[UploadEndpoint, ReleaseError]:
    """Create the release and return where its assets are uploaded.

    Args:
        http: Transport shared by the whole run
        spec: Release to create
        console: Receives request traces and failure diagnostics

    Returns:
        Ok with the upload endpoint, or Err with an "api" or "transport" error
    """
    url = spec.releases_url
    body = encode_payload(release_payload(spec))
    headers = auth_headers(spec) | {"Content-Type": JSON_CONTENT_TYPE}

    trace = describe_request("POST", url, headers, body=body.decode("utf-8"))
    console.debug(trace)

    try:
        response = await http.post(url, content=body, headers=headers)
    except httpx.TransportError as exc:
        return Err(transport_failure(method="POST", url=url, exc=exc))

    console.debug(describe_response(response))

    if not response.is_success or not response.content:
        return Err(
            api_failure(method="POST", url=url, response=response, console=console, trace=trace)
        )

    upload_url = parse_upload_url(response)
    if upload_url is None:
        return Err(
            ReleaseError(
                kind="api",
                message=f"POST {url} -> {status_line(response)}: response has no upload_url",
                detail=response.text or None,
            )
        )

    return Ok(UploadEndpoint.from_template(upload_url))
