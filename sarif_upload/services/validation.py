"""
SARIF schema validation.

Documents are checked against the static SARIF 2.1.0 JSON Schema. All
violations are collected and reported together rather than stopping at the
first one.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from jsonschema import Draft7Validator, ValidationError
from jsonschema.validators import validator_for

from sarif_upload.core.config import Settings
from sarif_upload.core.constants import SARIF_SCHEMA_FILENAME
from sarif_upload.core.exceptions import SchemaViolationError
from sarif_upload.models.sarif import SchemaViolation
from sarif_upload.services.sarif import load_sarif_file

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "resources" / SARIF_SCHEMA_FILENAME


def format_instance_path(path: Iterable[Union[str, int]]) -> str:
    """Render a path as ``instance.runs[0].tool``."""
    rendered = "instance"
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        elif part.isidentifier():
            rendered += f".{part}"
        else:
            rendered += f"[{json.dumps(part)}]"
    return rendered


class SchemaValidator(ABC):
    """Anything that can check a document against a JSON Schema."""

    @abstractmethod
    def validate(self, document: Any, schema: Dict[str, Any]) -> List[SchemaViolation]:
        """Return every violation; an empty list means the document is valid."""
        raise NotImplementedError


class JsonSchemaValidator(SchemaValidator):
    """SchemaValidator backed by the ``jsonschema`` package."""

    def validate(self, document: Any, schema: Dict[str, Any]) -> List[SchemaViolation]:
        validator_cls = validator_for(schema, default=Draft7Validator)
        errors = sorted(
            validator_cls(schema).iter_errors(document),
            key=lambda e: (format_instance_path(e.absolute_path), e.validator, e.message),
        )
        return [self._to_violation(error) for error in errors]

    @staticmethod
    def _to_violation(error: ValidationError) -> SchemaViolation:
        path = list(error.absolute_path)
        return SchemaViolation(
            stack=f"{format_instance_path(path)} {error.message}",
            path=path,
            message=error.message,
            validator=str(error.validator),
            violated_schema=error.schema,
        )


class SarifValidator:
    """Validates SARIF documents against a fixed schema file."""

    def __init__(
        self,
        schema_path: Optional[Union[str, Path]] = None,
        validator: Optional[SchemaValidator] = None,
    ):
        self.schema_path = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH
        self.validator = validator or JsonSchemaValidator()
        self._schema: Optional[Dict[str, Any]] = None

    @classmethod
    def from_settings(cls, settings: Settings, validator: Optional[SchemaValidator] = None) -> "SarifValidator":
        return cls(schema_path=settings.SARIF_SCHEMA_PATH, validator=validator)

    @property
    def schema(self) -> Dict[str, Any]:
        if self._schema is None:
            with open(self.schema_path, "r", encoding="utf-8") as f:
                self._schema = json.load(f)
        return self._schema

    def validate(self, document: Any) -> List[SchemaViolation]:
        return self.validator.validate(document, self.schema)

    def ensure_valid(self, document: Any, source: Optional[str] = None) -> None:
        """Raise SchemaViolationError listing every violation, after logging each in full."""
        violations = self.validate(document)
        if not violations:
            return

        for violation in violations:
            logger.info(f"Error details: {violation.stack}")
            logger.info(json.dumps(violation.model_dump(), indent=2, default=str))

        raise SchemaViolationError(violations, source=source)

    def validate_file(self, sarif_file: str) -> Dict[str, Any]:
        """Parse and validate one SARIF file, returning the parsed document."""
        document = load_sarif_file(sarif_file)
        self.ensure_valid(document, source=sarif_file)
        return document
