import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx

from sarif_upload.core.config import Settings
from sarif_upload.core.constants import (
    ANALYSIS_ENDPOINT,
    GITHUB_API_ACCEPT,
    GITHUB_API_SERVICE,
    SARIFS_ENDPOINT,
    STATUS_REPORT_ENDPOINT,
    WORKFLOW_RUN_ENDPOINT,
)
from sarif_upload.core.http_utils import HTTPRequestError, InstrumentedAsyncClient
from sarif_upload.models.repository import RepositoryNwo

logger = logging.getLogger(__name__)


class GitHubApiClient:
    """
    Client for the GitHub REST endpoints used by the upload pipeline.

    Requests are made once; retrying is left to the transport. A custom
    httpx transport can be passed in, which is how tests fake the API.
    """

    def __init__(
        self,
        settings: Settings,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.api_url = settings.GITHUB_API_URL.rstrip("/")
        self.token = token if token is not None else settings.GITHUB_TOKEN
        self._transport = transport

    def _get_auth_headers(self) -> Dict[str, str]:
        headers = {"Accept": GITHUB_API_ACCEPT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @asynccontextmanager
    async def _api_client(self) -> AsyncIterator[InstrumentedAsyncClient]:
        async with InstrumentedAsyncClient(
            GITHUB_API_SERVICE,
            timeout=self.settings.API_TIMEOUT_SECONDS,
            headers=self._get_auth_headers(),
            transport=self._transport,
        ) as client:
            yield client

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.api_url}{endpoint}"

    async def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        async with self._api_client() as client:
            return await client.request(method, self._url(endpoint), **kwargs)

    async def put_analysis(self, repository: RepositoryNwo, body: str) -> httpx.Response:
        """Upload an actions-mode analysis; non-2xx responses raise httpx.HTTPStatusError."""
        endpoint = ANALYSIS_ENDPOINT.format(owner=repository.owner, repo=repository.repo)
        response = await self.request("PUT", endpoint, content=body, headers={"Content-Type": "application/json"})
        response.raise_for_status()
        return response

    async def post_sarif(self, repository: RepositoryNwo, body: str) -> httpx.Response:
        """Upload a standalone SARIF; non-2xx responses raise httpx.HTTPStatusError."""
        endpoint = SARIFS_ENDPOINT.format(owner=repository.owner, repo=repository.repo)
        response = await self.request("POST", endpoint, content=body, headers={"Content-Type": "application/json"})
        response.raise_for_status()
        return response

    async def put_status_report(self, repository: RepositoryNwo, body: str) -> httpx.Response:
        """Send a status report. The response is returned whatever its status code."""
        endpoint = STATUS_REPORT_ENDPOINT.format(owner=repository.owner, repo=repository.repo)
        return await self.request("PUT", endpoint, content=body, headers={"Content-Type": "application/json"})

    async def get_workflow_path(self, repository: RepositoryNwo, run_id: int) -> str:
        """Path of the workflow file that started the given run, e.g. ``.github/workflows/ci.yml``."""
        endpoint = WORKFLOW_RUN_ENDPOINT.format(owner=repository.owner, repo=repository.repo, run_id=run_id)
        runs_response = await self.request("GET", endpoint)
        if runs_response.status_code != 200:
            raise HTTPRequestError(
                f"GitHub API GET {endpoint} failed: {runs_response.status_code}",
                status_code=runs_response.status_code,
            )
        workflow_url = runs_response.json().get("workflow_url")
        if not workflow_url:
            raise HTTPRequestError(f"Workflow run {run_id} has no workflow_url")

        workflow_response = await self.request("GET", workflow_url)
        if workflow_response.status_code != 200:
            raise HTTPRequestError(
                f"GitHub API GET {workflow_url} failed: {workflow_response.status_code}",
                status_code=workflow_response.status_code,
            )
        return workflow_response.json()["path"]
