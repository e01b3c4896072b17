"""
The upload-sarif phase of a code scanning job.

Brackets the upload with status reports: ``starting`` before anything else,
then ``success`` with the upload numbers or ``failure`` with the cause.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Optional

from sarif_upload.core.config import Settings
from sarif_upload.models.job_context import JobContext
from sarif_upload.models.upload import UploadIdentity, UploadMode
from sarif_upload.schemas.payload import UploadStatusReport
from sarif_upload.schemas.status_report import ActionName, ActionStatus
from sarif_upload.services.github import GitHubApiClient
from sarif_upload.services.job_identity import (
    get_analysis_key,
    get_commit_oid,
    get_ref,
    get_repository,
    get_workflow_run_id,
    prepare_local_run_environment,
)
from sarif_upload.services.payload import FingerprintEnricher
from sarif_upload.services.status_report import StatusReportBuilder, StatusReporter, with_upload_stats
from sarif_upload.services.upload import SarifUploader
from sarif_upload.services.validation import SarifValidator

logger = logging.getLogger(__name__)


async def run_upload_sarif(
    settings: Settings,
    enrich: FingerprintEnricher,
    sarif_path: str,
    checkout_path: str,
    job: Optional[JobContext] = None,
    client: Optional[GitHubApiClient] = None,
    validator: Optional[SarifValidator] = None,
    analysis_name: Optional[str] = None,
    environment: Optional[str] = None,
) -> Optional[UploadStatusReport]:
    """
    Run the upload phase in actions mode.

    Returns the upload numbers, or None when the starting report was
    rejected and the job has been marked as failed. Upload errors are
    reported and then re-raised.
    """
    job = job if job is not None else JobContext.from_settings(settings)
    client = client if client is not None else GitHubApiClient(settings)
    settings = prepare_local_run_environment(settings, job)

    builder = StatusReportBuilder(settings, job, client, checkout_path=checkout_path)
    reporter = StatusReporter(settings, job, client)
    started_at = datetime.now(timezone.utc)

    starting = await builder.build(ActionName.UPLOAD_SARIF, ActionStatus.STARTING, started_at)
    if not await reporter.send(starting):
        return None

    try:
        identity = UploadIdentity(
            commit_oid=await get_commit_oid(settings, checkout_path),
            ref=await get_ref(settings, checkout_path),
            checkout_path=checkout_path,
            analysis_key=await get_analysis_key(settings, job, client),
            analysis_name=analysis_name,
            workflow_run_id=get_workflow_run_id(settings),
            environment=environment,
            started_at=job.workflow_started_at,
        )
        uploader = SarifUploader(settings, job, client, enrich, validator=validator)
        upload_stats = await uploader.upload(sarif_path, get_repository(settings), UploadMode.ACTIONS, identity)
    except Exception as e:
        job.mark_failed(str(e))
        failure = await builder.build(
            ActionName.UPLOAD_SARIF,
            ActionStatus.FAILURE,
            started_at,
            cause=str(e),
            exception=traceback.format_exc(),
        )
        await reporter.send(failure, ignore_failures=True)
        raise

    success = await builder.build(ActionName.UPLOAD_SARIF, ActionStatus.SUCCESS, started_at)
    await reporter.send(with_upload_stats(success, upload_stats), ignore_failures=True)
    return upload_stats
