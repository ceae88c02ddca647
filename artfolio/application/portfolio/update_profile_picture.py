"""
Use case: Replace the current user's profile picture.

Input: UpdateProfilePictureCommand (one image file, user id)
Output: User
Side effects: Publishes the file on the file host; updates
    users.profile_image_url.
Failure cases: InvalidImageError, FileHostingError, UserNotFoundError.
"""

import logging
from typing import Iterable

from artfolio.application.portfolio.dtos import UpdateProfilePictureCommand
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.application.portfolio.upload_artwork import check_upload
from artfolio.domain.portfolio.entities import User
from artfolio.domain.portfolio.errors import InvalidImageError, UserNotFoundError
from artfolio.domain.portfolio.ports import FileHostingPort

logger = logging.getLogger(__name__)


class UpdateProfilePictureUseCase:
    """Orchestrates uploading a profile picture and storing its URL."""

    def __init__(
        self,
        portfolio_service: PortfolioService,
        file_host: FileHostingPort,
        allowed_types: Iterable[str],
        max_size_bytes: int,
    ) -> None:
        self._portfolios = portfolio_service
        self._file_host = file_host
        self._allowed_types = tuple(allowed_types)
        self._max_size_bytes = max_size_bytes

    def execute(self, command: UpdateProfilePictureCommand) -> User:
        """Run the update profile picture use case.

        Raises:
            UserNotFoundError: If the user does not exist.
            InvalidImageError: If the file type or size is not accepted.
            FileHostingError: If the file host fails the upload.
        """
        if self._portfolios.get_user_profile(command.user_id) is None:
            raise UserNotFoundError(command.user_id)

        problem = check_upload(command.file, self._allowed_types, self._max_size_bytes)
        if problem:
            raise InvalidImageError(problem)

        url = self._file_host.upload(command.file)
        user = self._portfolios.update_user_profile(
            command.user_id, {"profile_image_url": url}
        )
        if user is None:
            raise UserNotFoundError(command.user_id)
        logger.info("Updated profile picture for user %s", user.id)
        return user
