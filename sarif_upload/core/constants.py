"""
Shared Constants

Endpoints, environment names and messages used across the upload pipeline.
"""

from typing import Tuple

# The only server status reports are routed to; GHES installations are skipped
GITHUB_DOTCOM_URL: str = "https://github.com"

GITHUB_API_ACCEPT: str = "application/vnd.github+json"

# Code scanning endpoints (paths relative to the API root)
ANALYSIS_ENDPOINT: str = "/repos/{owner}/{repo}/code-scanning/analysis"
SARIFS_ENDPOINT: str = "/repos/{owner}/{repo}/code-scanning/sarifs"
STATUS_REPORT_ENDPOINT: str = "/repos/{owner}/{repo}/code-scanning/analysis/status"
WORKFLOW_RUN_ENDPOINT: str = "/repos/{owner}/{repo}/actions/runs/{run_id}"

SARIF_FILE_SUFFIX: str = ".sarif"
SARIF_SCHEMA_FILENAME: str = "sarif-schema-2.1.0.json"

# Local runs have no real job, so identity values get placeholders
LOCAL_RUN_JOB_NAME: str = "UNKNOWN-JOB"
LOCAL_RUN_ANALYSIS_KEY_PREFIX: str = "LOCAL-RUN"
LOCAL_RUN_FALSE_VALUES: Tuple[str, ...] = ("", "false", "0")

PULL_REQUEST_MERGE_REF_PATTERN: str = r"refs/pull/(\d+)/merge"
PULL_REQUEST_HEAD_REF_TEMPLATE: str = r"refs/pull/\1/head"

DUPLICATE_UPLOAD_MESSAGE: str = (
    "Aborting upload: only one run of the codeql/analyze or codeql/upload-sarif actions is allowed per job"
)
STATUS_REPORT_FORBIDDEN_MESSAGE: str = (
    "The repo on which this action is running is not opted-in to CodeQL code scanning."
)
STATUS_REPORT_NOT_FOUND_MESSAGE: str = "Not authorized to used the CodeQL code scanning feature on this repo."

# Status report responses that mean the upload will fail as well
STATUS_REPORT_FATAL_CODES = {
    403: STATUS_REPORT_FORBIDDEN_MESSAGE,
    404: STATUS_REPORT_NOT_FOUND_MESSAGE,
}

# Metric service labels
GITHUB_API_SERVICE: str = "GitHub API"
