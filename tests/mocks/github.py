"""Reusable GitHub mock objects and factory functions."""

import json

import httpx

from sarif_upload.core.config import Settings
from sarif_upload.models.upload import UploadIdentity
from sarif_upload.services.github import GitHubApiClient

COMMIT_SHA = "a" * 40


def make_settings(**overrides):
    """Create Settings for a job on github.com with sensible defaults."""
    values = {
        "GITHUB_REPOSITORY": "octo-org/octo-repo",
        "GITHUB_RUN_ID": "1234",
        "GITHUB_JOB": "analyze",
        "GITHUB_WORKFLOW": "CodeQL",
        "GITHUB_REF": "refs/heads/main",
        "GITHUB_SHA": COMMIT_SHA,
        "GITHUB_SERVER_URL": "https://github.com",
        "GITHUB_API_URL": "https://api.github.com",
        "GITHUB_TOKEN": "ghs_test_token",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_run(tool_name="CodeQL", num_results=1, rule_id="js/sql-injection"):
    """A SARIF run from ``tool_name`` holding ``num_results`` results."""
    return {
        "tool": {"driver": {"name": tool_name, "version": "2.15.0"}},
        "results": [
            {
                "ruleId": rule_id,
                "level": "error",
                "message": {"text": f"Finding {i}"},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": "src/app.js"},
                            "region": {"startLine": i + 1},
                        }
                    }
                ],
            }
            for i in range(num_results)
        ],
    }


def make_sarif(runs=None, version="2.1.0"):
    return {"version": version, "runs": runs if runs is not None else [make_run()]}


def make_identity(checkout_path, **overrides):
    values = {
        "commit_oid": COMMIT_SHA,
        "ref": "refs/heads/main",
        "checkout_path": str(checkout_path),
        "analysis_key": ".github/workflows/codeql.yml:analyze",
        "workflow_run_id": 1234,
        "started_at": "2024-01-01T00:00:00.000Z",
    }
    values.update(overrides)
    return UploadIdentity(**values)


def fake_enricher(sarif_json, checkout_path):
    """Adds a partial fingerprint to each result that does not have one yet."""
    document = json.loads(sarif_json)
    for run in document.get("runs") or []:
        for index, result in enumerate(run.get("results") or []):
            fingerprints = result.setdefault("partialFingerprints", {})
            fingerprints.setdefault("primaryLocationLineHash", f"{result.get('ruleId')}:{index}")
    return json.dumps(document, separators=(",", ":"))


class RecordingTransport(httpx.MockTransport):
    """
    MockTransport that records requests and answers from a route table.

    Routes map ``(method, path)`` to a status code, a ``(status, json)``
    tuple, or an httpx exception class to raise.
    """

    def __init__(self, routes=None, default_status=200):
        self.requests = []
        self.routes = routes or {}
        self.default_status = default_status
        super().__init__(self._handle)

    def _handle(self, request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path), self.default_status)
        if isinstance(route, type) and issubclass(route, httpx.HTTPError):
            raise route("Connection refused", request=request)
        if isinstance(route, tuple):
            status, body = route
            return httpx.Response(status, json=body)
        return httpx.Response(route, json={})

    def bodies(self):
        return [json.loads(r.content) for r in self.requests if r.content]


def make_client(settings, transport=None):
    return GitHubApiClient(settings, transport=transport or RecordingTransport())
