# services/images.py
"""
Service for selecting images and reading their bytes.

Stands in for the device image picker: turns user-supplied paths, file://
URIs and directories into an ordered list of image references, and reads
each reference's bytes through the file repository.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import unquote, urlparse

from neurolens.core.constants import MAX_BULK_IMAGES, SUPPORTED_IMAGE_EXTENSIONS
from neurolens.repository.protocol import FileRepositoryProtocol

from .base import BaseService, ServiceResult

logger = logging.getLogger(__name__)


def reference_to_path(reference: str) -> Path:
    """Convert a file:// URI or plain path to a Path."""
    if reference.startswith("file://"):
        return Path(unquote(urlparse(reference).path))
    return Path(reference).expanduser()


def reference_name(reference: str) -> str:
    """File name used when uploading the image."""
    return reference_to_path(reference).name or "image.jpg"


class ImageSourceService(BaseService):
    """
    Service for image selection.

    Example:
        >>> service = ImageSourceService(LocalFileRepository())
        >>> result = service.select(["scans/"], limit=500)
        >>> result.data  # ordered image references
    """

    def __init__(self, file_repository: FileRepositoryProtocol) -> None:
        super().__init__()
        self.file_repository = file_repository

    def _is_image(self, path: Path) -> bool:
        return path.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS

    def select(
        self,
        references: Sequence[str],
        recursive: bool = False,
        limit: Optional[int] = MAX_BULK_IMAGES,
    ) -> ServiceResult[List[str]]:
        """
        Expand paths and directories into image references.

        Directories contribute their image files in sorted order. Duplicates
        are dropped. When more than `limit` images are found, only the first
        `limit` are kept and a warning is attached.

        Args:
            references: Paths, file:// URIs or directories
            recursive: Descend into subdirectories
            limit: Maximum number of images, None for no limit

        Returns:
            ServiceResult with the selected references
        """
        selected: List[str] = []
        seen = set()
        warnings: List[str] = []

        for reference in references:
            path = reference_to_path(reference)
            if self.file_repository.is_dir(path):
                candidates = [
                    p for p in self.file_repository.list_files(path, recursive=recursive)
                    if self._is_image(p)
                ]
                if not candidates:
                    warnings.append(f"No images found in {reference}")
            elif self.file_repository.is_file(path):
                candidates = [path]
            else:
                warnings.append(f"Not found: {reference}")
                continue

            for candidate in candidates:
                key = str(candidate)
                if key not in seen:
                    seen.add(key)
                    selected.append(key)

        if not selected:
            return ServiceResult.fail("No images selected", warnings=warnings)

        if limit is not None and len(selected) > limit:
            warnings.append(
                f"Only the first {limit} of {len(selected)} images were selected "
                f"(maximum {limit} images)."
            )
            selected = selected[:limit]

        for warning in warnings:
            logger.warning(warning)

        return ServiceResult.ok(
            data=selected,
            message=f"Selected {len(selected)} image(s)",
            warnings=warnings,
        )

    def read_bytes(self, reference: str) -> bytes:
        """
        Read the bytes of one image.

        Raises:
            OSError: If the image cannot be read
        """
        return self.file_repository.read_binary(reference_to_path(reference))
