"""
Job-scoped state shared by the phases of one job.

The upload sentinel, the workflow start time and the analysis key are each
written once and then only read. Phases of a job run as separate processes,
so the context is persisted to a JSON state file after every change.
"""

import logging
import os
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field, PrivateAttr

from sarif_upload.core.constants import DUPLICATE_UPLOAD_MESSAGE
from sarif_upload.core.exceptions import DuplicateUploadError

if TYPE_CHECKING:
    from sarif_upload.core.config import Settings

logger = logging.getLogger(__name__)


class JobContext(BaseModel):
    upload_claimed: bool = Field(False, description="Whether an upload already ran in this job")
    workflow_started_at: Optional[str] = Field(None, description="Start time of the first phase of the job")
    analysis_key: Optional[str] = Field(None, description="Cached '<workflow path>:<job name>' key")
    failed: bool = Field(False, description="Whether the job has been marked as failed")
    failure_message: Optional[str] = None

    _state_path: Optional[str] = PrivateAttr(default=None)

    @classmethod
    def load(cls, state_path: Optional[str] = None) -> "JobContext":
        """Read the context from ``state_path``, or start empty when there is none."""
        if state_path and os.path.exists(state_path):
            with open(state_path, "r", encoding="utf-8") as f:
                context = cls.model_validate_json(f.read())
            logger.debug(f"Loaded job state from {state_path}")
        else:
            context = cls()
        context._state_path = state_path
        return context

    @classmethod
    def from_settings(cls, settings: "Settings") -> "JobContext":
        """
        Load the context for the current job.

        Values already exported to the job environment by an earlier phase
        seed anything the state file does not know about yet.
        """
        context = cls.load(settings.job_state_path)
        if settings.CODEQL_UPLOAD_SARIF:
            context.upload_claimed = True
        if context.analysis_key is None and settings.CODEQL_ACTION_ANALYSIS_KEY:
            context.analysis_key = settings.CODEQL_ACTION_ANALYSIS_KEY
        if context.workflow_started_at is None and settings.CODEQL_WORKFLOW_STARTED_AT:
            context.workflow_started_at = settings.CODEQL_WORKFLOW_STARTED_AT
        return context

    @property
    def state_path(self) -> Optional[str]:
        return self._state_path

    def save(self) -> None:
        if not self._state_path:
            return
        directory = os.path.dirname(self._state_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._state_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))
        os.replace(tmp_path, self._state_path)

    def claim_upload(self) -> None:
        """Claim the single upload allowed per job."""
        if self.upload_claimed:
            raise DuplicateUploadError(DUPLICATE_UPLOAD_MESSAGE)
        self.upload_claimed = True
        self.save()

    def resolve_workflow_started_at(self, candidate: str) -> str:
        """Return the recorded workflow start time, recording ``candidate`` if there is none."""
        if self.workflow_started_at is None:
            self.workflow_started_at = candidate
            self.save()
        return self.workflow_started_at

    def remember_analysis_key(self, analysis_key: str) -> str:
        if self.analysis_key is None:
            self.analysis_key = analysis_key
            self.save()
        return self.analysis_key

    def mark_failed(self, message: str) -> None:
        logger.error(message)
        if self.failed:
            return
        self.failed = True
        self.failure_message = message
        self.save()
