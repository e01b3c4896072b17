"""
SARIF Upload Service

Validates, combines, fingerprints and uploads SARIF files to code scanning.
Only one upload is allowed per job in actions mode.
"""

import json
import logging
from typing import List, Optional

from sarif_upload.core.config import Settings
from sarif_upload.core.metrics import (
    sarif_results_uploaded_total,
    sarif_upload_size_bytes,
    sarif_uploads_total,
)
from sarif_upload.models.job_context import JobContext
from sarif_upload.models.repository import RepositoryNwo
from sarif_upload.models.upload import UploadIdentity, UploadMode
from sarif_upload.schemas.payload import UploadStatusReport
from sarif_upload.services.github import GitHubApiClient
from sarif_upload.services.payload import FingerprintEnricher, PreparedUpload, build_payload
from sarif_upload.services.sarif import combine_sarif, resolve_sarif_files
from sarif_upload.services.validation import SarifValidator

logger = logging.getLogger(__name__)


class SarifUploader:
    def __init__(
        self,
        settings: Settings,
        job: JobContext,
        client: GitHubApiClient,
        enrich: FingerprintEnricher,
        validator: Optional[SarifValidator] = None,
    ):
        self.settings = settings
        self.job = job
        self.client = client
        self.enrich = enrich
        self.validator = validator or SarifValidator.from_settings(settings)

    async def upload(
        self,
        sarif_path: str,
        repository: RepositoryNwo,
        mode: UploadMode,
        identity: UploadIdentity,
    ) -> UploadStatusReport:
        """Upload a single SARIF file or every SARIF file in a directory."""
        sarif_files = resolve_sarif_files(sarif_path)
        return await self.upload_files(sarif_files, repository, mode, identity)

    async def upload_files(
        self,
        sarif_files: List[str],
        repository: RepositoryNwo,
        mode: UploadMode,
        identity: UploadIdentity,
    ) -> UploadStatusReport:
        logger.info(f"Uploading sarif files: {json.dumps(sarif_files)}")

        try:
            # Phases of a standalone run are not tied to one job, so the
            # sentinel only applies to actions mode
            if mode == UploadMode.ACTIONS:
                self.job.claim_upload()

            documents = [self.validator.validate_file(sarif_file) for sarif_file in sarif_files]
            combined = combine_sarif(documents)
            prepared = build_payload(combined, self.enrich, mode, identity)
            status_report = await self.upload_payload(prepared, repository)
        except Exception:
            sarif_uploads_total.labels(mode=mode.value, outcome="failure").inc()
            raise

        sarif_uploads_total.labels(mode=mode.value, outcome="success").inc()
        sarif_upload_size_bytes.labels(kind="raw").observe(prepared.raw_upload_size_bytes)
        sarif_upload_size_bytes.labels(kind="zipped").observe(prepared.zipped_upload_size_bytes)
        sarif_results_uploaded_total.inc(prepared.num_results_in_sarif)
        return status_report

    async def upload_payload(self, prepared: PreparedUpload, repository: RepositoryNwo) -> UploadStatusReport:
        """Send a prepared payload. In test mode nothing is sent."""
        logger.info("Uploading results")

        if self.settings.TEST_MODE:
            logger.info("Test mode is active, skipping the upload request")
            return prepared.status_report()

        if prepared.mode == UploadMode.ACTIONS:
            response = await self.client.put_analysis(repository, prepared.to_json())
        else:
            response = await self.client.post_sarif(repository, prepared.to_json())

        logger.debug(f"response status: {response.status_code}")
        logger.info("Successfully uploaded results")
        return prepared.status_report()
