from pydantic import BaseModel

from sarif_upload.core.exceptions import InvalidRepositoryError


class RepositoryNwo(BaseModel):
    """Repository name-with-owner, e.g. ``octo-org/octo-repo``."""

    owner: str
    repo: str

    @classmethod
    def parse(cls, value: str) -> "RepositoryNwo":
        parts = value.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidRepositoryError(value)
        return cls(owner=parts[0], repo=parts[1])

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"
