"""
Job identity helpers.

Resolve the commit, ref, run id and analysis key of the job being reported
on. Everything is read from Settings; values computed with API calls are
cached in the JobContext so later phases reuse them.
"""

import asyncio
import logging
import re
from typing import Optional

from sarif_upload.core.config import Settings
from sarif_upload.core.constants import (
    LOCAL_RUN_ANALYSIS_KEY_PREFIX,
    LOCAL_RUN_FALSE_VALUES,
    LOCAL_RUN_JOB_NAME,
    PULL_REQUEST_HEAD_REF_TEMPLATE,
    PULL_REQUEST_MERGE_REF_PATTERN,
)
from sarif_upload.core.exceptions import MissingIdentityError
from sarif_upload.models.job_context import JobContext
from sarif_upload.models.repository import RepositoryNwo
from sarif_upload.services.github import GitHubApiClient

logger = logging.getLogger(__name__)


def get_required_env_param(settings: Settings, param_name: str) -> str:
    value = getattr(settings, param_name, None)
    if value is None or value == "":
        raise MissingIdentityError(param_name)
    logger.debug(f"{param_name}={value}")
    return value


def is_local_run(settings: Settings) -> bool:
    value = settings.CODEQL_LOCAL_RUN
    return value is not None and value.strip().lower() not in LOCAL_RUN_FALSE_VALUES


def prepare_local_run_environment(settings: Settings, job: JobContext) -> Settings:
    """
    Settings to run with, with placeholder identity values filled in when
    running outside of Actions.

    The given settings are never modified; a copy is returned when a
    placeholder was needed.
    """
    if not is_local_run(settings):
        return settings

    logger.debug("Action is running locally.")
    if not settings.GITHUB_JOB:
        settings = settings.model_copy(update={"GITHUB_JOB": LOCAL_RUN_JOB_NAME})
    job.remember_analysis_key(f"{LOCAL_RUN_ANALYSIS_KEY_PREFIX}:{settings.GITHUB_JOB}")
    return settings


def get_repository(settings: Settings) -> RepositoryNwo:
    return RepositoryNwo.parse(get_required_env_param(settings, "GITHUB_REPOSITORY"))


async def get_commit_oid(settings: Settings, checkout_path: Optional[str] = None) -> str:
    """
    SHA of the commit currently checked out.

    Asks git first. This only differs from GITHUB_SHA when a pull request
    workflow checked out the head commit instead of the merge commit, so if
    git is unavailable the environment value is good enough.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            "rev-parse",
            "HEAD",
            cwd=checkout_path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise RuntimeError(stderr.decode("utf-8", errors="replace").strip())
        return stdout.decode("utf-8").strip()
    except (OSError, RuntimeError) as e:
        logger.info(f"Failed to call git to get current commit. Continuing with data from environment: {e}")
        return get_required_env_param(settings, "GITHUB_SHA")


def get_workflow_run_id(settings: Settings) -> int:
    value = get_required_env_param(settings, "GITHUB_RUN_ID")
    try:
        return int(value, 10)
    except ValueError:
        raise ValueError("GITHUB_RUN_ID must define a non NaN workflow run ID") from None


async def get_analysis_key(settings: Settings, job: JobContext, client: GitHubApiClient) -> str:
    """
    Analysis key of the current job: ``<workflow path>:<job name>``.

    The first call looks the workflow path up through the API; the result is
    kept in the JobContext for the rest of the job.
    """
    if job.analysis_key is not None:
        return job.analysis_key

    repository = get_repository(settings)
    run_id = get_workflow_run_id(settings)
    workflow_path = await client.get_workflow_path(repository, run_id)
    job_name = get_required_env_param(settings, "GITHUB_JOB")

    return job.remember_analysis_key(f"{workflow_path}:{job_name}")


async def get_ref(settings: Settings, checkout_path: Optional[str] = None) -> str:
    """
    Ref being analyzed.

    ``refs/pull/N/merge`` is reported as ``refs/pull/N/head`` when the
    workflow checked out the pull request head rather than the merge commit.
    """
    ref = get_required_env_param(settings, "GITHUB_REF")
    if not re.search(PULL_REQUEST_MERGE_REF_PATTERN, ref):
        return ref

    checkout_sha = await get_commit_oid(settings, checkout_path)
    if checkout_sha != get_required_env_param(settings, "GITHUB_SHA"):
        return re.sub(PULL_REQUEST_MERGE_REF_PATTERN, PULL_REQUEST_HEAD_REF_TEMPLATE, ref, count=1)
    return ref
