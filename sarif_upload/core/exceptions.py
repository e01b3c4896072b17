"""
Upload pipeline errors.

Every failure the pipeline raises on purpose derives from SarifUploadError so
callers can tell them apart from transport errors, which propagate as httpx
exceptions.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from sarif_upload.models.sarif import SchemaViolation


class SarifUploadError(Exception):
    """Base exception for the upload pipeline."""


class SarifPathNotFoundError(SarifUploadError):
    def __init__(self, path: str):
        super().__init__(f"Path does not exist: {path}")
        self.path = path


class NoSarifFilesError(SarifUploadError):
    def __init__(self, path: str):
        super().__init__(f'No SARIF files found to upload in "{path}".')
        self.path = path


class SchemaViolationError(SarifUploadError):
    """One document failed schema validation; carries every violation found."""

    def __init__(self, violations: List["SchemaViolation"], source: Optional[str] = None):
        details = "\n".join(f"- {violation.stack}" for violation in violations)
        label = source if source is not None else "document"
        super().__init__(f'Unable to upload "{label}" as it is not valid SARIF:\n{details}')
        self.violations = violations
        self.source = source


class VersionMismatchError(SarifUploadError):
    def __init__(self, expected: Optional[str], found: Optional[str]):
        super().__init__(f"Different SARIF versions encountered: {expected} and {found}")
        self.expected = expected
        self.found = found


class DuplicateUploadError(SarifUploadError):
    """The upload sentinel for this job has already been claimed."""


class MissingIdentityError(SarifUploadError):
    def __init__(self, param_name: str):
        super().__init__(f"{param_name} environment variable must be set")
        self.param_name = param_name


class InvalidRepositoryError(SarifUploadError):
    def __init__(self, value: str):
        super().__init__(f'"{value}" is not a valid repository name')
        self.value = value
