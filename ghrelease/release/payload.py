from __future__ import annotations

import json

from ghrelease.release.model import ReleaseSpec

RELEASE_FIELDS = ("tag_name", "target_commitish", "name", "body", "prerelease", "draft")


def release_payload(spec: ReleaseSpec) -> dict[str, object]:
    """Body of the release-creation request.

    Unset optional fields stay in the object as ``None`` so they serialize as
    JSON null.
    """
    return {
        "tag_name": spec.tag_name,
        "target_commitish": spec.target_commitish,
        "name": spec.name,
        "body": spec.body,
        "prerelease": spec.prerelease,
        "draft": spec.draft,
    }


def encode_payload(payload: dict[str, object]) -> bytes:
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
