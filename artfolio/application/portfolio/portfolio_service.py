"""
Portfolio data-access service.

The only component that reads and writes ``users``, ``portfolios`` and
``images``. All statements go through the StorageGateway port, so the
same service runs on the in-memory, SQL and hosted table-store backends.

Error policy:
    - No matching row is a normal result: None or an empty list.
    - Storage failures are logged here with the operation name and then
      propagate as typed errors (StorageConflictError,
      StorageUnavailableError, StorageError). Only a violation of the
      unique slug is raised as SlugConflictError.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional
from uuid import uuid4

from artfolio.application.portfolio.dtos import CreatePortfolioCommand, SaveImageCommand
from artfolio.domain.portfolio.entities import Image, Portfolio, User, utcnow
from artfolio.domain.portfolio.errors import (
    EmptyUpdateError,
    InvalidImageError,
    InvalidUpdateError,
    SlugConflictError,
    StorageConflictError,
    StorageError,
)
from artfolio.domain.portfolio.ports import (
    IMAGES,
    PORTFOLIOS,
    USERS,
    AnonymousIdentity,
    IdentityPort,
    StorageGateway,
)
from artfolio.domain.portfolio.slug import slugify, with_suffix

logger = logging.getLogger(__name__)

PORTFOLIO_UPDATABLE_FIELDS = frozenset({"title", "description", "slug", "is_public"})
PORTFOLIO_REQUIRED_FIELDS = frozenset({"title", "is_public"})
USER_UPDATABLE_FIELDS = frozenset(
    {"full_name", "profile_image_url", "artist_type", "website", "instagram", "twitter"}
)
OLDEST_FIRST = ("created_at", "id")


def new_id() -> str:
    """Return a fresh opaque row id."""
    return str(uuid4())


@contextmanager
def storage_diagnostics(operation: str, subject: Any) -> Iterator[None]:
    """Log a storage failure once, with context, and let it propagate."""
    try:
        yield
    except StorageError as exc:
        logger.error("%s failed for %s: %s", operation, subject, exc.message)
        raise


def is_slug_conflict(exc: StorageConflictError) -> bool:
    """True when a constraint violation was caused by the unique slug."""
    return "slug" in exc.detail.lower()


class PortfolioService:
    """Data-access layer for users, portfolios and images.

    Args:
        storage: Gateway to durable storage.
        identity: Source of the current user id, used when an image is
            saved without an explicit owner.
        slug_suffix_length: Length of the random suffix appended to a
            slug that is already taken.
    """

    def __init__(
        self,
        storage: StorageGateway,
        identity: Optional[IdentityPort] = None,
        slug_suffix_length: int = 6,
    ) -> None:
        self._storage = storage
        self._identity = identity or AnonymousIdentity()
        self._slug_suffix_length = slug_suffix_length

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_profile(self, user_id: str) -> Optional[User]:
        """Return the user with this id, or None."""
        with storage_diagnostics("get_user_profile", user_id):
            rows = self._storage.select(USERS, {"id": user_id}, limit=1)
        return User.from_row(rows[0]) if rows else None

    def update_user_profile(
        self, user_id: str, changes: Mapping[str, Any]
    ) -> Optional[User]:
        """Apply a sparse update to a user's profile fields.

        Args:
            user_id: The user to update.
            changes: Any of ``full_name``, ``profile_image_url``,
                ``artist_type``, ``website``, ``instagram``, ``twitter``.

        Returns:
            The updated user, or None if no user has this id.

        Raises:
            EmptyUpdateError: If ``changes`` is empty.
            InvalidUpdateError: If ``changes`` names other fields.
        """
        if not changes:
            raise EmptyUpdateError()
        unknown = set(changes) - USER_UPDATABLE_FIELDS
        if unknown:
            raise InvalidUpdateError(sorted(unknown))

        with storage_diagnostics("update_user_profile", user_id):
            rows = self._storage.update(USERS, {"id": user_id}, dict(changes))
        if not rows:
            return None
        logger.info("Updated profile fields %s for user %s", sorted(changes), user_id)
        return User.from_row(rows[0])

    # ------------------------------------------------------------------
    # Portfolios
    # ------------------------------------------------------------------

    def get_portfolio_by_slug(self, slug: str) -> Optional[Portfolio]:
        """Return the portfolio with exactly this slug, or None."""
        with storage_diagnostics("get_portfolio_by_slug", slug):
            rows = self._storage.select(PORTFOLIOS, {"slug": slug}, limit=1)
        return Portfolio.from_row(rows[0]) if rows else None

    def get_portfolio_by_id(self, portfolio_id: str) -> Optional[Portfolio]:
        """Return the portfolio with this id, or None."""
        with storage_diagnostics("get_portfolio_by_id", portfolio_id):
            rows = self._storage.select(PORTFOLIOS, {"id": portfolio_id}, limit=1)
        return Portfolio.from_row(rows[0]) if rows else None

    def get_user_portfolio(self, user_id: str) -> Optional[Portfolio]:
        """Return the portfolio owned by a user, or None.

        Nothing stops a user from owning several portfolios. When that
        happens the earliest one wins and a warning is logged.
        """
        with storage_diagnostics("get_user_portfolio", user_id):
            rows = self._storage.select(
                PORTFOLIOS, {"user_id": user_id}, order_by=OLDEST_FIRST
            )
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(
                "User %s owns %d portfolios; using the earliest (%s)",
                user_id,
                len(rows),
                rows[0]["id"],
            )
        return Portfolio.from_row(rows[0])

    def create_portfolio(self, command: CreatePortfolioCommand) -> Portfolio:
        """Insert a portfolio and return it with its generated id and timestamps.

        Raises:
            SlugConflictError: If the slug is already taken.
            StorageConflictError: For any other constraint violation, such
                as an owner that does not exist.
        """
        now = utcnow()
        row = {
            "id": new_id(),
            "user_id": command.user_id,
            "title": command.title,
            "description": command.description or None,
            "slug": command.slug or None,
            "is_public": True if command.is_public is None else command.is_public,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with storage_diagnostics("create_portfolio", command.user_id):
                stored = self._storage.insert(PORTFOLIOS, row)
        except StorageConflictError as exc:
            if row["slug"] and is_slug_conflict(exc):
                raise SlugConflictError(row["slug"]) from exc
            raise

        portfolio = Portfolio.from_row(stored)
        logger.info(
            "Created portfolio %s (slug=%s) for user %s",
            portfolio.id,
            portfolio.slug,
            portfolio.user_id,
        )
        return portfolio

    def update_portfolio(
        self, portfolio_id: str, changes: Mapping[str, Any]
    ) -> Optional[Portfolio]:
        """Apply a sparse update and stamp ``updated_at``.

        Only the keys present in ``changes`` are written; every other
        column keeps its value. An empty mapping returns the portfolio
        unchanged.

        Args:
            portfolio_id: The portfolio to update.
            changes: Any of ``title``, ``description``, ``slug``, ``is_public``.

        Returns:
            The updated portfolio, or None if no portfolio has this id.

        Raises:
            InvalidUpdateError: If ``changes`` names other fields, or sets
                ``title`` or ``is_public`` to None.
            SlugConflictError: If the new slug is already taken.
        """
        unknown = set(changes) - PORTFOLIO_UPDATABLE_FIELDS
        if unknown:
            raise InvalidUpdateError(sorted(unknown))
        cleared = [f for f in PORTFOLIO_REQUIRED_FIELDS if f in changes and changes[f] is None]
        if cleared:
            raise InvalidUpdateError(sorted(cleared), reason="cannot be null")
        if not changes:
            return self.get_portfolio_by_id(portfolio_id)

        payload = {**changes, "updated_at": utcnow()}
        try:
            with storage_diagnostics("update_portfolio", portfolio_id):
                rows = self._storage.update(PORTFOLIOS, {"id": portfolio_id}, payload)
        except StorageConflictError as exc:
            if changes.get("slug") and is_slug_conflict(exc):
                raise SlugConflictError(str(changes["slug"])) from exc
            raise

        if not rows:
            return None
        return Portfolio.from_row(rows[0])

    def generate_unique_slug(self, base_text: str) -> str:
        """Return a slug for ``base_text`` that is free at the time of the check.

        The base slug is returned as is when no portfolio uses it.
        Otherwise a random suffix is appended. The suffixed value is not
        checked again, so a second collision is possible; writers must
        still handle SlugConflictError.
        """
        candidate = slugify(base_text)
        with storage_diagnostics("generate_unique_slug", candidate):
            taken = self._storage.select(PORTFOLIOS, {"slug": candidate}, limit=1)
        if not taken:
            return candidate
        suffixed = with_suffix(candidate, self._slug_suffix_length)
        logger.debug("Slug %s is taken; using %s", candidate, suffixed)
        return suffixed

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def get_images_for_portfolio(self, portfolio_id: str) -> list[Image]:
        """Return the portfolio's images, oldest first."""
        with storage_diagnostics("get_images_for_portfolio", portfolio_id):
            rows = self._storage.select(
                IMAGES, {"portfolio_id": portfolio_id}, order_by=OLDEST_FIRST
            )
        return [Image.from_row(row) for row in rows]

    def get_images_for_user(self, user_id: str) -> list[Image]:
        """Return the user's images, oldest first."""
        with storage_diagnostics("get_images_for_user", user_id):
            rows = self._storage.select(
                IMAGES, {"user_id": user_id}, order_by=OLDEST_FIRST
            )
        return [Image.from_row(row) for row in rows]

    def save_image(self, command: SaveImageCommand) -> Image:
        """Insert an image row.

        When ``user_id`` is omitted the current user's id is used.

        Raises:
            InvalidImageError: If ``image_url`` is blank, or if neither an
                owning user nor a portfolio can be determined.
        """
        image_url = (command.image_url or "").strip()
        if not image_url:
            raise InvalidImageError("image_url is required")

        user_id = command.user_id
        if not user_id:
            user_id = self._identity.current_user_id()
            logger.debug("Using current user %s as image owner", user_id)
        if not user_id and not command.portfolio_id:
            raise InvalidImageError("image has no owning user or portfolio")

        row = {
            "id": new_id(),
            "image_url": image_url,
            "portfolio_id": command.portfolio_id or None,
            "user_id": user_id or None,
            "created_at": utcnow(),
        }
        with storage_diagnostics("save_image", user_id or command.portfolio_id):
            stored = self._storage.insert(IMAGES, row)
        return Image.from_row(stored)

    def delete_image(self, image_id: str, user_id: Optional[str] = None) -> bool:
        """Delete the image with this id.

        Deleting an id that does not exist is not an error; it returns
        False. When ``user_id`` is given only that user's image matches.

        Returns:
            True if a row was removed.
        """
        filters: dict[str, Any] = {"id": image_id}
        if user_id is not None:
            filters["user_id"] = user_id
        with storage_diagnostics("delete_image", image_id):
            removed = self._storage.delete(IMAGES, filters)
        if removed:
            logger.info("Deleted image %s", image_id)
        return removed > 0
