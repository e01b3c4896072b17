"""
SARIF document shapes.

Runs and results are treated as opaque JSON objects; only the keys the
pipeline reads are spelled out here.
"""

from typing import Any, Dict, List, Optional, TypedDict, Union

from pydantic import BaseModel, Field


class SarifRun(TypedDict, total=False):
    tool: Dict[str, Any]
    results: List[Dict[str, Any]]


class SarifDocument(TypedDict):
    version: Optional[str]
    runs: List[SarifRun]


class SchemaViolation(BaseModel):
    """A single JSON Schema violation found in a SARIF document."""

    stack: str = Field(..., description="Path into the document followed by the violation message")
    path: List[Union[str, int]] = Field(default_factory=list, description="Structural path to the offending value")
    message: str = Field(..., description="Validator message")
    validator: str = Field(..., description="Schema keyword that failed (e.g. 'required')")
    violated_schema: Any = Field(None, description="Sub-schema the value was checked against")
