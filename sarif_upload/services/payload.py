"""
Upload payload construction.

The combined document goes through a fixed sequence: serialize, add
fingerprints, gzip + base64, collect tool names, then assemble the body for
the selected upload mode.
"""

import base64
import gzip
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

from pydantic import BaseModel

from sarif_upload.core.exceptions import MissingIdentityError
from sarif_upload.models.upload import UploadIdentity, UploadMode
from sarif_upload.schemas.payload import (
    ActionsPayload,
    StandalonePayload,
    UploadPayload,
    UploadStatusReport,
    payload_to_json,
)
from sarif_upload.services.sarif import count_results, get_tool_names

logger = logging.getLogger(__name__)

# (sarif_json, checkout_path) -> sarif_json with fingerprints added to each result.
# Must leave already fingerprinted results unchanged.
FingerprintEnricher = Callable[[str, str], str]


class PreparedUpload(BaseModel):
    payload: UploadPayload
    raw_upload_size_bytes: int
    zipped_upload_size_bytes: int
    num_results_in_sarif: int

    @property
    def mode(self) -> UploadMode:
        return UploadMode(self.payload.mode)

    def to_json(self) -> str:
        return payload_to_json(self.payload)

    def status_report(self) -> UploadStatusReport:
        return {
            "raw_upload_size_bytes": self.raw_upload_size_bytes,
            "zipped_upload_size_bytes": self.zipped_upload_size_bytes,
            "num_results_in_sarif": self.num_results_in_sarif,
        }


def serialize_sarif(document: Dict[str, Any]) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def compress_sarif(sarif_json: str) -> str:
    return base64.b64encode(gzip.compress(sarif_json.encode("utf-8"))).decode("ascii")


def decompress_sarif(zipped_sarif: str) -> str:
    return gzip.decompress(base64.b64decode(zipped_sarif)).decode("utf-8")


def checkout_uri(checkout_path: str) -> str:
    """``file://`` URI for the checkout directory."""
    return Path(checkout_path).resolve().as_uri()


def build_payload(
    combined: Dict[str, Any],
    enrich: FingerprintEnricher,
    mode: UploadMode,
    identity: UploadIdentity,
) -> PreparedUpload:
    sarif_json = enrich(serialize_sarif(combined), identity.checkout_path)
    zipped_sarif = compress_sarif(sarif_json)

    fingerprinted = json.loads(sarif_json)
    tool_names = get_tool_names(fingerprinted)

    payload: UploadPayload
    if mode == UploadMode.ACTIONS:
        if not identity.analysis_key:
            raise MissingIdentityError("CODEQL_ACTION_ANALYSIS_KEY")
        payload = ActionsPayload(
            commit_oid=identity.commit_oid,
            ref=identity.ref,
            analysis_key=identity.analysis_key,
            analysis_name=identity.analysis_name,
            sarif=zipped_sarif,
            workflow_run_id=identity.workflow_run_id,
            checkout_uri=checkout_uri(identity.checkout_path),
            environment=identity.environment,
            started_at=identity.started_at,
            tool_names=tool_names,
        )
    else:
        payload = StandalonePayload(
            commit_sha=identity.commit_oid,
            ref=identity.ref,
            sarif=zipped_sarif,
            checkout_uri=checkout_uri(identity.checkout_path),
            tool_name=tool_names[0] if tool_names else None,
        )

    # Raw size is the UTF-8 byte length; zipped size is the length of the
    # base64 text, not of the gzip bytes. Downstream consumers rely on both.
    raw_upload_size_bytes = len(sarif_json.encode("utf-8"))
    logger.debug(f"Raw upload size: {raw_upload_size_bytes} bytes")
    zipped_upload_size_bytes = len(zipped_sarif)
    logger.debug(f"Base64 zipped upload size: {zipped_upload_size_bytes} bytes")
    num_results_in_sarif = count_results(fingerprinted)
    logger.debug(f"Number of results in upload: {num_results_in_sarif}")

    return PreparedUpload(
        payload=payload,
        raw_upload_size_bytes=raw_upload_size_bytes,
        zipped_upload_size_bytes=zipped_upload_size_bytes,
        num_results_in_sarif=num_results_in_sarif,
    )
