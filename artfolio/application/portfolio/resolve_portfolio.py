"""
Use case: Resolve a public path identifier to a portfolio page.

Input: ResolvePortfolioQuery (identifier, optional current user)
Output: PortfolioPage
Side effects: None (read-only query).
Failure cases: PortfolioNotFoundError.
"""

import logging
from typing import Optional

from artfolio.application.portfolio.dtos import PortfolioPage, ResolvePortfolioQuery
from artfolio.application.portfolio.event_service import EventService
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.domain.portfolio.entities import Image, Portfolio
from artfolio.domain.portfolio.errors import PortfolioNotFoundError

logger = logging.getLogger(__name__)


class ResolvePortfolioUseCase:
    """Orchestrates looking up a portfolio page.

    The identifier is tried as a slug first, then as a portfolio id.
    The reserved alias (``my-portfolio`` by default) then falls back to
    the requester's own portfolio. Private portfolios resolve only for
    their owner.
    """

    def __init__(
        self,
        portfolio_service: PortfolioService,
        event_service: EventService,
        my_portfolio_alias: str = "my-portfolio",
    ) -> None:
        self._portfolios = portfolio_service
        self._events = event_service
        self._alias = my_portfolio_alias

    def execute(self, query: ResolvePortfolioQuery) -> PortfolioPage:
        """Run the resolve portfolio use case.

        Args:
            query: The path identifier and the requester.

        Returns:
            The portfolio with its owner, images and events.

        Raises:
            PortfolioNotFoundError: If nothing matches, or the match is
                private and the requester is not its owner.
        """
        portfolio = self._lookup(query)
        if portfolio is None:
            raise PortfolioNotFoundError(query.identifier)

        if not portfolio.visible_to(query.current_user_id):
            logger.info("Portfolio %s is private; hiding it from requester", portfolio.id)
            raise PortfolioNotFoundError(query.identifier)

        owner = self._portfolios.get_user_profile(portfolio.user_id)
        images = self._collect_images(portfolio)
        events = self._events.list_events(portfolio.user_id)
        return PortfolioPage(portfolio=portfolio, owner=owner, images=images, events=events)

    def _lookup(self, query: ResolvePortfolioQuery) -> Optional[Portfolio]:
        portfolio = self._portfolios.get_portfolio_by_slug(query.identifier)
        if portfolio is not None:
            return portfolio

        portfolio = self._portfolios.get_portfolio_by_id(query.identifier)
        if portfolio is not None:
            return portfolio

        if query.identifier == self._alias and query.current_user_id:
            logger.debug("Resolving alias %s for user %s", self._alias, query.current_user_id)
            return self._portfolios.get_user_portfolio(query.current_user_id)
        return None

    def _collect_images(self, portfolio: Portfolio) -> list[Image]:
        # page images plus everything the owner uploaded, deduplicated by id.
        # Images another user attached to the page are left out.
        by_id: dict[str, Image] = {}
        for image in self._portfolios.get_images_for_portfolio(portfolio.id):
            if image.user_id not in (None, portfolio.user_id):
                continue
            by_id[image.id] = image
        for image in self._portfolios.get_images_for_user(portfolio.user_id):
            by_id.setdefault(image.id, image)
        return sorted(
            by_id.values(),
            key=lambda img: (img.created_at is None, img.created_at, img.id),
        )
