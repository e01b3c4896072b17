"""
Status reporting for the phases of a code scanning job.

StatusReportBuilder composes the progress record of one phase from the job
identity; StatusReporter sends it and decides whether the response means the
job should stop.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from sarif_upload.core import to_iso_timestamp
from sarif_upload.core.config import Settings
from sarif_upload.core.constants import GITHUB_DOTCOM_URL, STATUS_REPORT_FATAL_CODES
from sarif_upload.core.metrics import status_reports_total
from sarif_upload.models.job_context import JobContext
from sarif_upload.schemas.payload import UploadStatusReport
from sarif_upload.schemas.status_report import (
    TERMINAL_STATUSES,
    ActionName,
    ActionStatus,
    StatusReportBase,
    UploadSarifStatusReport,
)
from sarif_upload.services.github import GitHubApiClient
from sarif_upload.services.job_identity import (
    get_analysis_key,
    get_ref,
    get_repository,
    get_required_env_param,
    get_workflow_run_id,
    is_local_run,
)

logger = logging.getLogger(__name__)


class StatusReportBuilder:
    def __init__(
        self,
        settings: Settings,
        job: JobContext,
        client: GitHubApiClient,
        checkout_path: Optional[str] = None,
    ):
        self.settings = settings
        self.job = job
        self.client = client
        self.checkout_path = checkout_path

    async def build(
        self,
        action_name: ActionName,
        status: ActionStatus,
        action_started_at: datetime,
        cause: Optional[str] = None,
        exception: Optional[str] = None,
    ) -> StatusReportBase:
        """
        Compose the report for one phase.

        The first phase of a job records its start time as the workflow start
        time; later phases reuse it. ``completed_at`` is only set for
        terminal statuses. Raises MissingIdentityError if the job identity is
        incomplete.
        """
        workflow_run_id = get_workflow_run_id(self.settings)
        workflow_name = get_required_env_param(self.settings, "GITHUB_WORKFLOW")
        job_name = get_required_env_param(self.settings, "GITHUB_JOB")
        commit_oid = get_required_env_param(self.settings, "GITHUB_SHA")
        ref = await get_ref(self.settings, self.checkout_path)
        analysis_key = await get_analysis_key(self.settings, self.job, self.client)

        action_started = to_iso_timestamp(action_started_at)
        started_at = self.job.resolve_workflow_started_at(action_started)

        fields = {
            "workflow_run_id": workflow_run_id,
            "workflow_name": workflow_name,
            "job_name": job_name,
            "analysis_key": analysis_key,
            "commit_oid": commit_oid,
            "ref": ref,
            "action_name": action_name,
            "action_oid": self.settings.ACTION_OID,
            "started_at": started_at,
            "action_started_at": action_started,
            "status": status,
        }
        if cause:
            fields["cause"] = cause
        if exception:
            fields["exception"] = exception
        if ActionStatus(status) in TERMINAL_STATUSES:
            fields["completed_at"] = to_iso_timestamp(datetime.now(timezone.utc))
        if self.settings.MATRIX:
            fields["matrix_vars"] = self.settings.MATRIX

        return StatusReportBase(**fields)


def with_upload_stats(report: StatusReportBase, upload_stats: UploadStatusReport) -> UploadSarifStatusReport:
    """Copy of ``report`` carrying the numbers of a finished upload."""
    return UploadSarifStatusReport(**{**report.model_dump(), **upload_stats})


class StatusReporter:
    def __init__(self, settings: Settings, job: JobContext, client: GitHubApiClient):
        self.settings = settings
        self.job = job
        self.client = client

    async def send(self, report: StatusReportBase, ignore_failures: bool = False) -> bool:
        """
        Send a status report to the code scanning status endpoint.

        Returns False only when the endpoint answers 403 or 404 and failures
        are not ignored; the job is then marked as failed. Those two answers
        mean the upload would be rejected as well. Any other outcome,
        including transport errors, may be transient and returns True.
        """
        if self.settings.GITHUB_SERVER_URL.rstrip("/") != GITHUB_DOTCOM_URL:
            logger.debug("Not sending status report to GitHub Enterprise")
            return True

        if is_local_run(self.settings):
            logger.debug("Not sending status report because this is a local run")
            return True

        body = report.to_json()
        logger.debug(f"Sending status report: {body}")

        repository = get_repository(self.settings)
        try:
            response = await self.client.put_status_report(repository, body)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to send status report: {e}")
            self._record(report, "error")
            return True

        if not ignore_failures:
            message = STATUS_REPORT_FATAL_CODES.get(response.status_code)
            if message is not None:
                self.job.mark_failed(message)
                self._record(report, "rejected")
                return False

        self._record(report, "sent")
        return True

    @staticmethod
    def _record(report: StatusReportBase, outcome: str) -> None:
        status_reports_total.labels(action=report.action_name, status=report.status, outcome=outcome).inc()
