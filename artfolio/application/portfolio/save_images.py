"""
Use case: Save a batch of uploaded image URLs.

Input: SaveImagesCommand (image URLs, owner, optional portfolio)
Output: SaveImagesResult
Side effects: One images row per successfully saved URL.
Failure cases: PortfolioNotFoundError when the target portfolio does not
    exist or belongs to another user (nothing is saved). Otherwise none
    raised; per-image failures are reported in the result.
"""

import logging
from typing import Optional

from artfolio.application.portfolio.dtos import (
    ImageSaveFailure,
    SaveImageCommand,
    SaveImagesCommand,
    SaveImagesResult,
)
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.domain.portfolio.errors import (
    PortfolioDomainError,
    PortfolioNotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)


class SaveImagesUseCase:
    """Orchestrates saving several images one insert at a time.

    The batch is not atomic. A failed insert is recorded and the batch
    moves on, so images before and after it stay saved.
    """

    def __init__(self, portfolio_service: PortfolioService) -> None:
        self._portfolios = portfolio_service

    def check_target(self, portfolio_id: Optional[str], user_id: Optional[str]) -> None:
        """Raise PortfolioNotFoundError unless ``user_id`` owns the portfolio.

        Someone else's portfolio is reported as missing, the same as a
        portfolio that does not exist.
        """
        if not portfolio_id:
            return
        portfolio = self._portfolios.get_portfolio_by_id(portfolio_id)
        if portfolio is None or portfolio.user_id != user_id:
            logger.warning("User %s may not add images to portfolio %s", user_id, portfolio_id)
            raise PortfolioNotFoundError(portfolio_id)

    def execute(self, command: SaveImagesCommand) -> SaveImagesResult:
        """Run the save images use case.

        Args:
            command: URLs to save and their owner.

        Returns:
            The saved images and the failures, in request order.
        """
        self.check_target(command.portfolio_id, command.user_id)

        saved = []
        failures = []
        for image_url in command.image_urls:
            try:
                image = self._portfolios.save_image(
                    SaveImageCommand(
                        image_url=image_url,
                        portfolio_id=command.portfolio_id,
                        user_id=command.user_id,
                    )
                )
            except (StorageError, PortfolioDomainError) as exc:
                failures.append(ImageSaveFailure(image_url=image_url, reason=exc.message))
                continue
            saved.append(image)

        if failures:
            logger.warning(
                "Saved %d of %d images for user %s",
                len(saved),
                len(command.image_urls),
                command.user_id,
            )
        else:
            logger.info("Saved %d images for user %s", len(saved), command.user_id)
        return SaveImagesResult(saved=saved, failures=failures)
