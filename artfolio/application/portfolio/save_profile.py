"""
Use case: Save the current user's profile and portfolio page.

Input: SaveProfileCommand (name, bio, optional slug and visibility)
Output: Portfolio
Side effects: Updates the user's full_name and profile links; creates the
    portfolio on first save, updates it afterwards.
Failure cases: UserNotFoundError, SlugConflictError (after retries),
    PortfolioNotFoundError (portfolio removed mid-save).
"""

import logging
from typing import Any, Optional

from artfolio.application.portfolio.dtos import CreatePortfolioCommand, SaveProfileCommand
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.domain.portfolio.entities import Portfolio, User
from artfolio.domain.portfolio.errors import (
    PortfolioNotFoundError,
    SlugConflictError,
    UserNotFoundError,
)
from artfolio.domain.portfolio.slug import slugify

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Artist Portfolio"
PROFILE_LINK_FIELDS = ("artist_type", "website", "instagram", "twitter")


class SaveProfileUseCase:
    """Orchestrates the profile-save flow.

    A unique-slug collision (possible because a suffixed slug is not
    re-checked) is retried with a freshly generated slug, up to
    ``slug_retry_attempts`` attempts in total.
    """

    def __init__(
        self,
        portfolio_service: PortfolioService,
        slug_retry_attempts: int = 3,
    ) -> None:
        self._portfolios = portfolio_service
        self._attempts = max(1, slug_retry_attempts)

    def execute(self, command: SaveProfileCommand) -> Portfolio:
        """Run the save profile use case.

        Args:
            command: Profile fields entered by the user.

        Returns:
            The created or updated portfolio.

        Raises:
            UserNotFoundError: If the user does not exist.
            SlugConflictError: If every attempt collided on the slug.
        """
        user = self._portfolios.get_user_profile(command.user_id)
        if user is None:
            raise UserNotFoundError(command.user_id)

        user_changes = self._user_changes(user, command)
        if user_changes:
            user = self._portfolios.update_user_profile(user.id, user_changes) or user

        existing = self._portfolios.get_user_portfolio(user.id)
        if existing is None:
            return self._create(user, command)
        return self._update(existing, user, command)

    def _create(self, user: User, command: SaveProfileCommand) -> Portfolio:
        base = command.slug or user.full_name or user.username or "portfolio"
        title = user.full_name or user.username or DEFAULT_TITLE
        attempt = 1
        while True:
            slug = self._portfolios.generate_unique_slug(base)
            try:
                return self._portfolios.create_portfolio(
                    CreatePortfolioCommand(
                        user_id=user.id,
                        title=title,
                        description=command.bio,
                        slug=slug,
                        is_public=command.is_public,
                    )
                )
            except SlugConflictError:
                if attempt >= self._attempts:
                    raise
                logger.warning("Slug %s collided on create, retrying (%d)", slug, attempt)
                attempt += 1

    def _update(
        self, existing: Portfolio, user: User, command: SaveProfileCommand
    ) -> Portfolio:
        changes: dict[str, Any] = {}
        title = user.full_name or existing.title
        if title != existing.title:
            changes["title"] = title
        if command.bio is not None and command.bio != existing.description:
            changes["description"] = command.bio
        if command.is_public is not None and command.is_public != existing.is_public:
            changes["is_public"] = command.is_public

        wanted_slug = self._requested_slug(command.slug, existing)
        attempt = 1
        while True:
            if wanted_slug is not None:
                changes["slug"] = self._portfolios.generate_unique_slug(wanted_slug)
            try:
                updated = self._portfolios.update_portfolio(existing.id, changes)
                break
            except SlugConflictError:
                if wanted_slug is None or attempt >= self._attempts:
                    raise
                logger.warning("Slug %s collided on update, retrying (%d)", changes["slug"], attempt)
                attempt += 1

        # the row vanished between read and write
        if updated is None:
            raise PortfolioNotFoundError(existing.id)
        return updated

    @staticmethod
    def _user_changes(user: User, command: SaveProfileCommand) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        full_name = (command.full_name or "").strip() or None
        if full_name and full_name != user.full_name:
            changes["full_name"] = full_name
        for field in PROFILE_LINK_FIELDS:
            value = getattr(command, field)
            if value is None:
                continue
            value = value.strip() or None
            if value != getattr(user, field):
                changes[field] = value
        return changes

    @staticmethod
    def _requested_slug(requested: Optional[str], existing: Portfolio) -> Optional[str]:
        if not requested:
            return None
        if slugify(requested) == existing.slug:
            return None
        return requested
