"""
SARIF file handling: locating input files, combining documents, counting
results and listing the tools that produced them.
"""

import copy
import json
import logging
import os
from typing import Any, Dict, List, Sequence

from sarif_upload.core.constants import SARIF_FILE_SUFFIX
from sarif_upload.core.exceptions import (
    NoSarifFilesError,
    SarifPathNotFoundError,
    VersionMismatchError,
)
from sarif_upload.models.sarif import SarifDocument

logger = logging.getLogger(__name__)


def resolve_sarif_files(sarif_path: str) -> List[str]:
    """
    Turn an upload location into the list of files to upload.

    A file is uploaded as is. A directory contributes every ``*.sarif`` file
    directly inside it, in name order.
    """
    if not os.path.exists(sarif_path):
        raise SarifPathNotFoundError(sarif_path)

    if not os.path.isdir(sarif_path):
        return [sarif_path]

    sarif_files = [
        os.path.abspath(os.path.join(sarif_path, name))
        for name in sorted(os.listdir(sarif_path))
        if name.endswith(SARIF_FILE_SUFFIX)
    ]
    if not sarif_files:
        raise NoSarifFilesError(sarif_path)
    return sarif_files


def load_sarif_file(sarif_file: str) -> Dict[str, Any]:
    with open(sarif_file, "r", encoding="utf-8") as f:
        return json.load(f)


def combine_sarif(documents: Sequence[Dict[str, Any]]) -> SarifDocument:
    """
    Merge several SARIF documents into one.

    The version of the first document is the version of the result; any
    other version aborts the merge. Runs are appended in input order and
    deep-copied so the combined document does not share state with its inputs.
    """
    combined: SarifDocument = {"version": None, "runs": []}

    for index, document in enumerate(documents):
        version = document.get("version")
        if index == 0:
            combined["version"] = version
        elif version != combined["version"]:
            raise VersionMismatchError(combined["version"], version)

        combined["runs"].extend(copy.deepcopy(document.get("runs") or []))

    return combined


def combine_sarif_files(sarif_files: Sequence[str]) -> SarifDocument:
    return combine_sarif([load_sarif_file(f) for f in sarif_files])


def count_results(document: Dict[str, Any]) -> int:
    """Total number of results over all runs."""
    return sum(len(run.get("results") or []) for run in document.get("runs") or [])


def get_tool_names(document: Dict[str, Any]) -> List[str]:
    """Distinct driver names in the order they first appear."""
    tool_names: List[str] = []
    for run in document.get("runs") or []:
        driver = (run.get("tool") or {}).get("driver") or {}
        name = driver.get("name")
        if isinstance(name, str) and name and name not in tool_names:
            tool_names.append(name)
    return tool_names
