from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UploadMode(str, Enum):
    ACTIONS = "actions"
    STANDALONE = "standalone"


class UploadIdentity(BaseModel):
    """Who and what an upload is for. Resolved by the caller before uploading."""

    commit_oid: str = Field(..., description="Commit the results were produced for")
    ref: str = Field(..., description="Git ref, e.g. refs/heads/main")
    checkout_path: str = Field(..., description="Local path of the analyzed checkout")
    analysis_key: Optional[str] = Field(None, description="'<workflow path>:<job name>', actions mode only")
    analysis_name: Optional[str] = None
    workflow_run_id: Optional[int] = None
    environment: Optional[str] = Field(None, description="Serialized matrix environment")
    started_at: Optional[str] = Field(None, description="Workflow start time, actions mode only")
