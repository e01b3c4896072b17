"""
Shared test fixtures and configuration.

Identity variables are removed from the environment so a CI runner's own
GITHUB_* values never leak into Settings built by the tests.
"""

import json
import os
import sys

# Ensure the project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest  # noqa: E402

from tests.mocks.github import make_run, make_sarif  # noqa: E402

_ISOLATED_ENV_VARS = (
    "GITHUB_REPOSITORY",
    "GITHUB_RUN_ID",
    "GITHUB_JOB",
    "GITHUB_WORKFLOW",
    "GITHUB_REF",
    "GITHUB_SHA",
    "GITHUB_SERVER_URL",
    "GITHUB_API_URL",
    "GITHUB_TOKEN",
    "CODEQL_LOCAL_RUN",
    "TEST_MODE",
    "CODEQL_ACTION_ANALYSIS_KEY",
    "CODEQL_WORKFLOW_STARTED_AT",
    "CODEQL_UPLOAD_SARIF",
    "MATRIX",
    "ACTION_OID",
    "SARIF_SCHEMA_PATH",
    "JOB_STATE_FILE",
    "RUNNER_TEMP",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_sarif(tmp_path):
    """Write a SARIF document to ``tmp_path`` and return its path."""
    def _write(name, document):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def two_file_upload(write_sarif):
    """a.sarif with two results and b.sarif with none, both version 2.1.0."""
    a = write_sarif("a.sarif", make_sarif([make_run("ToolA", 2)]))
    b = write_sarif("b.sarif", make_sarif([make_run("ToolB", 0)]))
    return [a, b]
