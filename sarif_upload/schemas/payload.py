"""
Wire shapes for SARIF uploads.

Field names are part of the contract with the code scanning API and must not
be renamed. Optional fields that are unset are left out of the JSON body.
"""

from typing import Annotated, List, Literal, Optional, TypedDict, Union

from pydantic import BaseModel, Field


class ActionsPayload(BaseModel):
    """Body of ``PUT /repos/{owner}/{repo}/code-scanning/analysis``."""

    mode: Literal["actions"] = Field("actions", exclude=True)

    commit_oid: str
    ref: str
    analysis_key: str
    analysis_name: Optional[str] = None
    sarif: str = Field(..., description="base64(gzip(fingerprinted SARIF JSON))")
    workflow_run_id: Optional[int] = None
    checkout_uri: str
    environment: Optional[str] = None
    started_at: Optional[str] = None
    tool_names: List[str] = Field(default_factory=list)


class StandalonePayload(BaseModel):
    """Body of ``POST /repos/{owner}/{repo}/code-scanning/sarifs``."""

    mode: Literal["standalone"] = Field("standalone", exclude=True)

    commit_sha: str
    ref: str
    sarif: str = Field(..., description="base64(gzip(fingerprinted SARIF JSON))")
    checkout_uri: str
    tool_name: Optional[str] = Field(None, description="First tool name found in the document")


UploadPayload = Annotated[Union[ActionsPayload, StandalonePayload], Field(discriminator="mode")]


def payload_to_json(payload: UploadPayload) -> str:
    return payload.model_dump_json(exclude_none=True)


class UploadStatusReport(TypedDict, total=False):
    """Observability numbers for one successful upload."""

    # Size in bytes of the fingerprinted SARIF JSON
    raw_upload_size_bytes: int
    # Length of the base64 text actually sent
    zipped_upload_size_bytes: int
    num_results_in_sarif: int
