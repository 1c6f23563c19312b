from __future__ import annotations

import httpx

from ghrelease.core.result import Err, Ok, Result
from ghrelease.output.console import ConsoleProtocol
from ghrelease.release.creator import api_failure, transport_failure
from ghrelease.release.errors import ReleaseError
from ghrelease.release.http import (
    HttpTransport,
    auth_headers,
    describe_request,
    describe_response,
)
from ghrelease.release.model import AssetJob, ReleaseSpec, UploadEndpoint


async def upload_asset(
    http: HttpTransport,
    endpoint: UploadEndpoint,
    job: AssetJob,
    spec: ReleaseSpec,
    *,
    console: ConsoleProtocol,
) -> Result[AssetJob, ReleaseError]:
    """Upload one asset to a created release.

    The request goes to ``endpoint.literal_url(job.name)``; traces show the
    escaped form of the same URL and never the file contents.

    Returns:
        Ok with the job on any 2xx, or Err with an "api", "transport" or
        "packaging" error
    """
    url = endpoint.literal_url(job.name)
    headers = auth_headers(spec) | {"Content-Type": job.content_type}

    trace = describe_request("POST", endpoint.query_url(job.name), headers, body="<redacted>")
    console.debug(trace)

    try:
        content = job.upload_path.read_bytes()
    except OSError as e:
        return Err(ReleaseError(kind="packaging", message=f"cannot read {job.upload_path}: {e}"))

    try:
        response = await http.post(url, content=content, headers=headers)
    except httpx.TransportError as exc:
        return Err(transport_failure(method="POST", url=url, exc=exc))

    console.debug(describe_response(response))

    if not response.is_success:
        return Err(
            api_failure(method="POST", url=url, response=response, console=console, trace=trace)
        )

    return Ok(job)
