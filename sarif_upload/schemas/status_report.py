from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActionName(str, Enum):
    INIT = "init"
    AUTOBUILD = "autobuild"
    FINISH = "finish"
    UPLOAD_SARIF = "upload-sarif"


class ActionStatus(str, Enum):
    STARTING = "starting"
    ABORTED = "aborted"
    SUCCESS = "success"
    FAILURE = "failure"


TERMINAL_STATUSES = frozenset({ActionStatus.SUCCESS, ActionStatus.FAILURE, ActionStatus.ABORTED})


class StatusReportBase(BaseModel):
    """Progress record for one phase of one job, sent to the status endpoint."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    workflow_run_id: int = Field(..., description="ID of the workflow run containing the action run")
    workflow_name: str = Field(..., description="Workflow name, turned into analysis_name server side")
    job_name: str
    analysis_key: str = Field(..., description="Normally '<workflow path>:<job name>'")
    matrix_vars: Optional[str] = Field(None, description="Matrix values for this instantiation of the job")
    commit_oid: str
    ref: str
    action_name: ActionName
    action_oid: str = Field(..., description="Version of the action being executed")
    started_at: str = Field(..., description="Time the first phase of the job started")
    action_started_at: str = Field(..., description="Time this phase started")
    completed_at: Optional[str] = Field(None, description="Only set for terminal statuses")
    status: ActionStatus
    cause: Optional[str] = None
    exception: Optional[str] = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class UploadSarifStatusReport(StatusReportBase):
    """Terminal report of the upload phase, extended with the upload numbers."""

    raw_upload_size_bytes: Optional[int] = None
    zipped_upload_size_bytes: Optional[int] = None
    num_results_in_sarif: Optional[int] = None
