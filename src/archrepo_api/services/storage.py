"""Backing-file storage for artifacts.

Artifacts only record metadata about a file; removing the file itself is a
best-effort side effect of artifact deletion.
"""

import typing
from pathlib import Path

import aiofiles.os

from archrepo_api.services.errors import ValidationError


@typing.runtime_checkable
class ArtifactStorage(typing.Protocol):
    """Removes the file backing an artifact."""

    async def remove(self, file_path: str) -> None: ...


class LocalArtifactStorage:
    """Artifact files on the local filesystem under `root`.

    File paths are relative to `root` and may not leave it.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def resolve(self, file_path: str) -> Path:
        """Map an artifact file path to a location inside `root`.

        Raises:
            ValidationError: "path-outside-root" for absolute paths and for
                relative paths that escape `root` (via ".." or symlinks).
        """
        path = Path(file_path)
        root = self.root.resolve()
        resolved = (root / path).resolve()
        if path.is_absolute() or not resolved.is_relative_to(root):
            raise ValidationError(
                "path-outside-root",
                f"Artifact file path {file_path!r} is outside the artifact root",
                file_path=file_path,
            )
        return resolved

    async def remove(self, file_path: str) -> None:
        await aiofiles.os.remove(self.resolve(file_path))
