"""
Use case: Upload artwork files and save them as portfolio images.

Input: UploadArtworkCommand (files, owner, optional portfolio)
Output: SaveImagesResult
Side effects: Files are published on the file host; one images row per
    published file.
Failure cases: PortfolioNotFoundError when the target portfolio does not
    exist or belongs to another user; nothing is uploaded. Otherwise none
    raised; rejected or failed files are reported in the result's failures.
"""

import logging
from typing import Iterable

from artfolio.application.portfolio.dtos import (
    ImageSaveFailure,
    SaveImagesCommand,
    SaveImagesResult,
    UploadArtworkCommand,
)
from artfolio.application.portfolio.save_images import SaveImagesUseCase
from artfolio.domain.portfolio.entities import UploadedFile
from artfolio.domain.portfolio.errors import FileHostingError
from artfolio.domain.portfolio.ports import FileHostingPort

logger = logging.getLogger(__name__)


def check_upload(
    file: UploadedFile, allowed_types: Iterable[str], max_size_bytes: int
) -> str | None:
    """Return why a file may not be uploaded, or None when it is acceptable."""
    if file.content_type not in set(allowed_types):
        return f"unsupported content type {file.content_type}"
    if file.size == 0:
        return "file is empty"
    if file.size > max_size_bytes:
        return f"file exceeds {max_size_bytes} bytes"
    return None


class UploadArtworkUseCase:
    """Orchestrates uploading artwork and recording the resulting images."""

    def __init__(
        self,
        file_host: FileHostingPort,
        save_images: SaveImagesUseCase,
        allowed_types: Iterable[str],
        max_size_bytes: int,
    ) -> None:
        self._file_host = file_host
        self._save_images = save_images
        self._allowed_types = tuple(allowed_types)
        self._max_size_bytes = max_size_bytes

    def execute(self, command: UploadArtworkCommand) -> SaveImagesResult:
        """Run the upload artwork use case.

        Args:
            command: Files to publish and their owner.

        Returns:
            Saved images, plus failures for files that were rejected,
            failed to upload, or failed to save.
        """
        self._save_images.check_target(command.portfolio_id, command.user_id)

        urls: list[str] = []
        failures: list[ImageSaveFailure] = []

        for file in command.files:
            problem = check_upload(file, self._allowed_types, self._max_size_bytes)
            if problem:
                logger.info("Rejected upload %s: %s", file.filename, problem)
                failures.append(ImageSaveFailure(image_url=file.filename, reason=problem))
                continue
            try:
                urls.append(self._file_host.upload(file))
            except FileHostingError as exc:
                failures.append(ImageSaveFailure(image_url=file.filename, reason=exc.reason))

        result = self._save_images.execute(
            SaveImagesCommand(
                image_urls=urls,
                user_id=command.user_id,
                portfolio_id=command.portfolio_id,
            )
        )
        return SaveImagesResult(
            saved=result.saved,
            failures=failures + result.failures,
        )
