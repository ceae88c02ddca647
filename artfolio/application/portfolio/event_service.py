"""
Event data-access service.

Reads and writes the ``events`` table: workshops, performances and
exhibitions an artist lists on their page. Events are created and
deleted, never edited.
"""

import logging

from artfolio.application.portfolio.dtos import AddEventCommand
from artfolio.application.portfolio.portfolio_service import new_id, storage_diagnostics
from artfolio.domain.portfolio.entities import Event, utcnow
from artfolio.domain.portfolio.errors import InvalidEventError
from artfolio.domain.portfolio.ports import EVENTS, StorageGateway

logger = logging.getLogger(__name__)


class EventService:
    """Data-access layer for artist events."""

    def __init__(self, storage: StorageGateway) -> None:
        self._storage = storage

    def list_events(self, user_id: str) -> list[Event]:
        """Return a user's events ordered by date, then creation time."""
        with storage_diagnostics("list_events", user_id):
            rows = self._storage.select(
                EVENTS, {"user_id": user_id}, order_by=("event_date", "created_at")
            )
        return [Event.from_row(row) for row in rows]

    def add_event(self, command: AddEventCommand) -> Event:
        """Validate and insert an event.

        Raises:
            InvalidEventError: If title, date or location is missing.
        """
        missing = [
            name
            for name, value in (
                ("title", (command.title or "").strip()),
                ("event_date", command.event_date),
                ("location", (command.location or "").strip()),
            )
            if not value
        ]
        if missing:
            raise InvalidEventError(f"missing {', '.join(missing)}")

        row = {
            "id": new_id(),
            "user_id": command.user_id,
            "title": command.title.strip(),
            "event_date": command.event_date,
            "location": command.location.strip(),
            "description": (command.description or "").strip() or None,
            "event_type": command.event_type.value,
            "created_at": utcnow(),
        }
        with storage_diagnostics("add_event", command.user_id):
            stored = self._storage.insert(EVENTS, row)
        event = Event.from_row(stored)
        logger.info("Added %s event %s for user %s", event.event_type.value, event.id, event.user_id)
        return event

    def delete_event(self, event_id: str, user_id: str) -> bool:
        """Delete one of the user's events. Returns True if a row was removed."""
        with storage_diagnostics("delete_event", event_id):
            removed = self._storage.delete(EVENTS, {"id": event_id, "user_id": user_id})
        return removed > 0
