"""Tests for the GitHub API client."""

import asyncio

import httpx
import pytest

from sarif_upload.models.repository import RepositoryNwo
from sarif_upload.services.github import GitHubApiClient
from tests.mocks.github import RecordingTransport, make_settings

REPOSITORY = RepositoryNwo(owner="octo-org", repo="octo-repo")


class TestGitHubApiClient:
    def test_auth_and_accept_headers(self):
        transport = RecordingTransport()
        client = GitHubApiClient(make_settings(), transport=transport)
        asyncio.run(client.request("GET", "/rate_limit"))

        request = transport.requests[0]
        assert str(request.url) == "https://api.github.com/rate_limit"
        assert request.headers["Authorization"] == "Bearer ghs_test_token"
        assert request.headers["Accept"] == "application/vnd.github+json"

    def test_no_auth_header_without_token(self):
        transport = RecordingTransport()
        client = GitHubApiClient(make_settings(GITHUB_TOKEN=None), transport=transport)
        asyncio.run(client.request("GET", "/rate_limit"))
        assert "Authorization" not in transport.requests[0].headers

    def test_explicit_token_wins(self):
        transport = RecordingTransport()
        client = GitHubApiClient(make_settings(), token="other", transport=transport)
        asyncio.run(client.request("GET", "/rate_limit"))
        assert transport.requests[0].headers["Authorization"] == "Bearer other"

    def test_enterprise_api_url(self):
        transport = RecordingTransport()
        settings = make_settings(GITHUB_API_URL="https://ghe.example.com/api/v3/")
        asyncio.run(GitHubApiClient(settings, transport=transport).request("GET", "/meta"))
        assert str(transport.requests[0].url) == "https://ghe.example.com/api/v3/meta"

    def test_status_report_response_returned_on_error(self):
        transport = RecordingTransport(default_status=404)
        client = GitHubApiClient(make_settings(), transport=transport)
        response = asyncio.run(client.put_status_report(REPOSITORY, "{}"))

        assert response.status_code == 404
        assert transport.requests[0].headers["Content-Type"] == "application/json"

    def test_post_sarif_raises_on_error_status(self):
        client = GitHubApiClient(make_settings(), transport=RecordingTransport(default_status=413))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(client.post_sarif(REPOSITORY, "{}"))

    def test_workflow_path_follows_workflow_url(self):
        transport = RecordingTransport(
            {
                ("GET", "/repos/octo-org/octo-repo/actions/runs/99"): (
                    200,
                    {"workflow_url": "https://api.github.com/repos/octo-org/octo-repo/actions/workflows/3"},
                ),
                ("GET", "/repos/octo-org/octo-repo/actions/workflows/3"): (200, {"path": ".github/workflows/scan.yml"}),
            }
        )
        client = GitHubApiClient(make_settings(), transport=transport)
        assert asyncio.run(client.get_workflow_path(REPOSITORY, 99)) == ".github/workflows/scan.yml"
