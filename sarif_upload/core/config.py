import os
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Job identity, exported by the Actions runner
    GITHUB_REPOSITORY: Optional[str] = None
    GITHUB_RUN_ID: Optional[str] = None
    GITHUB_JOB: Optional[str] = None
    GITHUB_WORKFLOW: Optional[str] = None
    GITHUB_REF: Optional[str] = None
    GITHUB_SHA: Optional[str] = None

    # Routing and credentials
    GITHUB_SERVER_URL: str = "https://github.com"
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: Optional[str] = None
    API_TIMEOUT_SECONDS: float = 30.0

    # Policy flags
    CODEQL_LOCAL_RUN: Optional[str] = None
    TEST_MODE: bool = False

    # Values shared between the phases of one job
    CODEQL_ACTION_ANALYSIS_KEY: Optional[str] = None
    CODEQL_WORKFLOW_STARTED_AT: Optional[str] = None
    CODEQL_UPLOAD_SARIF: Optional[str] = None

    # Status report extras
    MATRIX: Optional[str] = None
    ACTION_OID: str = "unknown"

    # Files
    SARIF_SCHEMA_PATH: Optional[str] = None
    JOB_STATE_FILE: Optional[str] = None
    RUNNER_TEMP: Optional[str] = None

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    @property
    def job_state_path(self) -> Optional[str]:
        """Location of the file that carries job state between phases, if any."""
        if self.JOB_STATE_FILE:
            return self.JOB_STATE_FILE
        if self.RUNNER_TEMP:
            run_id = self.GITHUB_RUN_ID or "local"
            job = self.GITHUB_JOB or "job"
            return os.path.join(self.RUNNER_TEMP, f"sarif-upload-{run_id}-{job}.json")
        return None
