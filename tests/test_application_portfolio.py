"""
Tests for the portfolio application layer (use cases and EventService).

Use cases run against the in-memory storage adapter; the file host is
a mock. Each test verifies orchestration, not storage details.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from artfolio.application.portfolio.dtos import (
    AddEventCommand,
    CreatePortfolioCommand,
    ResolvePortfolioQuery,
    SaveImagesCommand,
    SaveProfileCommand,
    UpdateProfilePictureCommand,
    UploadArtworkCommand,
)
from artfolio.application.portfolio.event_service import EventService
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.application.portfolio.resolve_portfolio import ResolvePortfolioUseCase
from artfolio.application.portfolio.save_images import SaveImagesUseCase
from artfolio.application.portfolio.save_profile import SaveProfileUseCase
from artfolio.application.portfolio.update_profile_picture import (
    UpdateProfilePictureUseCase,
)
from artfolio.application.portfolio.upload_artwork import UploadArtworkUseCase, check_upload
from artfolio.domain.portfolio.entities import EventType, UploadedFile
from artfolio.domain.portfolio.errors import (
    FileHostingError,
    InvalidEventError,
    InvalidImageError,
    PortfolioNotFoundError,
    SlugConflictError,
    StorageConflictError,
    StorageError,
    UserNotFoundError,
)
from artfolio.domain.portfolio.ports import IMAGES, PORTFOLIOS, USERS, FileHostingPort
from artfolio.infrastructure.portfolio.memory_storage import InMemoryStorageAdapter

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
ALLOWED = ("image/png", "image/jpeg")


# ══════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════


class FailingInsertStorage(InMemoryStorageAdapter):
    """In-memory storage whose image inserts fail for chosen URLs."""

    def __init__(self, failing_urls: set[str]) -> None:
        super().__init__()
        self.failing_urls = failing_urls

    def insert(self, table, row):
        if table == IMAGES and row.get("image_url") in self.failing_urls:
            raise StorageError("insert failed")
        return super().insert(table, row)


class OrphanPortfolioStorage(InMemoryStorageAdapter):
    """In-memory storage that rejects portfolio inserts like a foreign key would."""

    def __init__(self) -> None:
        super().__init__()
        self.portfolio_inserts = 0

    def insert(self, table, row):
        if table == PORTFOLIOS:
            self.portfolio_inserts += 1
            raise StorageConflictError(table, "FOREIGN KEY constraint failed")
        return super().insert(table, row)


@pytest.fixture
def memory() -> InMemoryStorageAdapter:
    storage = InMemoryStorageAdapter()
    storage.insert(
        USERS,
        {"id": "user-1", "email": "jane@example.com", "username": "janed", "created_at": T0},
    )
    storage.insert(USERS, {"id": "user-2", "email": "john@example.com", "created_at": T0})
    return storage


@pytest.fixture
def portfolios(memory) -> PortfolioService:
    return PortfolioService(memory)


@pytest.fixture
def file_host() -> MagicMock:
    host = MagicMock(spec=FileHostingPort)
    host.upload.side_effect = lambda f: f"https://cdn.example.com/{f.filename}"
    return host


def _png(name: str = "a.png", size: int = 10) -> UploadedFile:
    return UploadedFile(filename=name, content=b"x" * size, content_type="image/png")


# ══════════════════════════════════════════════════════════════════════
# ResolvePortfolioUseCase
# ══════════════════════════════════════════════════════════════════════


class TestResolvePortfolioUseCase:
    """Tests for slug / id / alias resolution."""

    @pytest.fixture
    def use_case(self, portfolios, memory) -> ResolvePortfolioUseCase:
        return ResolvePortfolioUseCase(portfolios, EventService(memory))

    def test_resolves_by_slug(self, use_case, portfolios) -> None:
        created = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane-doe")
        )
        page = use_case.execute(ResolvePortfolioQuery(identifier="jane-doe"))
        assert page.portfolio.id == created.id
        assert page.owner.id == "user-1"

    def test_resolves_by_id(self, use_case, portfolios) -> None:
        created = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane")
        )
        page = use_case.execute(ResolvePortfolioQuery(identifier=created.id))
        assert page.portfolio.id == created.id

    def test_slug_wins_over_id(self, use_case, portfolios) -> None:
        first = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane")
        )
        by_slug = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-2", title="John", slug=first.id)
        )
        page = use_case.execute(ResolvePortfolioQuery(identifier=first.id))
        assert page.portfolio.id == by_slug.id

    def test_alias_resolves_current_users_portfolio(self, use_case, portfolios) -> None:
        created = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane")
        )
        page = use_case.execute(
            ResolvePortfolioQuery(identifier="my-portfolio", current_user_id="user-1")
        )
        assert page.portfolio.id == created.id

    def test_alias_without_user_is_not_found(self, use_case) -> None:
        with pytest.raises(PortfolioNotFoundError):
            use_case.execute(ResolvePortfolioQuery(identifier="my-portfolio"))

    def test_unknown_identifier_is_not_found(self, use_case) -> None:
        with pytest.raises(PortfolioNotFoundError) as exc_info:
            use_case.execute(ResolvePortfolioQuery(identifier="nobody"))
        assert exc_info.value.identifier == "nobody"

    def test_private_portfolio_hidden_from_others(self, use_case, portfolios) -> None:
        portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane", is_public=False)
        )
        with pytest.raises(PortfolioNotFoundError):
            use_case.execute(ResolvePortfolioQuery(identifier="jane", current_user_id="user-2"))
        page = use_case.execute(ResolvePortfolioQuery(identifier="jane", current_user_id="user-1"))
        assert page.portfolio.is_public is False

    def test_images_merged_deduplicated_and_sorted(self, use_case, portfolios, memory) -> None:
        created = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane")
        )
        rows = [
            ("both", 3, created.id, "user-1"),
            ("page-only", 1, created.id, None),
            ("user-only", 2, None, "user-1"),
            ("someone-else", 0, None, "user-2"),
        ]
        for image_id, minutes, portfolio_id, user_id in rows:
            memory.insert(
                IMAGES,
                {
                    "id": image_id,
                    "image_url": f"https://x/{image_id}.png",
                    "portfolio_id": portfolio_id,
                    "user_id": user_id,
                    "created_at": T0 + timedelta(minutes=minutes),
                },
            )

        page = use_case.execute(ResolvePortfolioQuery(identifier="jane"))
        assert [i.id for i in page.images] == ["page-only", "user-only", "both"]

    def test_images_attached_by_other_users_left_out(self, use_case, portfolios, memory) -> None:
        created = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane")
        )
        memory.insert(
            IMAGES,
            {
                "id": "intruder",
                "image_url": "https://x/intruder.png",
                "portfolio_id": created.id,
                "user_id": "user-2",
                "created_at": T0,
            },
        )

        page = use_case.execute(ResolvePortfolioQuery(identifier="jane"))
        assert page.images == []

    def test_page_includes_owner_events(self, use_case, portfolios, memory) -> None:
        portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane", slug="jane")
        )
        EventService(memory).add_event(
            AddEventCommand(
                user_id="user-1", title="Open studio", event_date=date(2024, 6, 1), location="Lyon"
            )
        )
        page = use_case.execute(ResolvePortfolioQuery(identifier="jane"))
        assert [e.title for e in page.events] == ["Open studio"]


# ══════════════════════════════════════════════════════════════════════
# SaveProfileUseCase
# ══════════════════════════════════════════════════════════════════════


class TestSaveProfileUseCase:
    """Tests for the profile-save flow."""

    def test_first_save_creates_portfolio(self, portfolios) -> None:
        use_case = SaveProfileUseCase(portfolios)
        portfolio = use_case.execute(
            SaveProfileCommand(user_id="user-1", full_name="Jane Doe", bio="Painter")
        )
        assert portfolio.title == "Jane Doe"
        assert portfolio.slug == "jane-doe"
        assert portfolio.description == "Painter"
        assert portfolio.is_public is True
        assert portfolios.get_user_profile("user-1").full_name == "Jane Doe"

    def test_title_falls_back_to_username(self, portfolios) -> None:
        portfolio = SaveProfileUseCase(portfolios).execute(SaveProfileCommand(user_id="user-1"))
        assert portfolio.title == "janed"
        assert portfolio.slug == "janed"

    def test_title_falls_back_to_default(self, portfolios) -> None:
        portfolio = SaveProfileUseCase(portfolios).execute(SaveProfileCommand(user_id="user-2"))
        assert portfolio.title == "Artist Portfolio"
        assert portfolio.slug == "portfolio"

    def test_second_save_updates(self, portfolios) -> None:
        use_case = SaveProfileUseCase(portfolios)
        first = use_case.execute(SaveProfileCommand(user_id="user-1", full_name="Jane Doe"))
        second = use_case.execute(
            SaveProfileCommand(user_id="user-1", bio="New bio", is_public=False)
        )
        assert second.id == first.id
        assert second.description == "New bio"
        assert second.is_public is False
        assert second.slug == "jane-doe"

    def test_requested_slug_is_normalized(self, portfolios) -> None:
        use_case = SaveProfileUseCase(portfolios)
        use_case.execute(SaveProfileCommand(user_id="user-1", full_name="Jane Doe"))
        updated = use_case.execute(SaveProfileCommand(user_id="user-1", slug="Jane Paints!"))
        assert updated.slug == "jane-paints"

    def test_taken_slug_gets_suffix(self, portfolios) -> None:
        portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-2", title="Other", slug="jane-doe")
        )
        portfolio = SaveProfileUseCase(portfolios).execute(
            SaveProfileCommand(user_id="user-1", full_name="Jane Doe")
        )
        assert portfolio.slug.startswith("jane-doe-")

    def test_unknown_user_rejected(self, portfolios) -> None:
        with pytest.raises(UserNotFoundError):
            SaveProfileUseCase(portfolios).execute(SaveProfileCommand(user_id="ghost"))

    def test_slug_conflict_retried(self, portfolios, monkeypatch) -> None:
        """A collision on create is retried with a fresh slug."""
        real_create = portfolios.create_portfolio
        calls = []

        def flaky_create(command):
            calls.append(command.slug)
            if len(calls) == 1:
                raise SlugConflictError(command.slug)
            return real_create(command)

        monkeypatch.setattr(portfolios, "create_portfolio", flaky_create)
        portfolio = SaveProfileUseCase(portfolios, slug_retry_attempts=3).execute(
            SaveProfileCommand(user_id="user-1", full_name="Jane Doe")
        )
        assert len(calls) == 2
        assert portfolio.user_id == "user-1"

    def test_slug_conflict_gives_up_after_attempts(self, portfolios, monkeypatch) -> None:
        def always_conflict(command):
            raise SlugConflictError(command.slug)

        monkeypatch.setattr(portfolios, "create_portfolio", always_conflict)
        with pytest.raises(SlugConflictError):
            SaveProfileUseCase(portfolios, slug_retry_attempts=2).execute(
                SaveProfileCommand(user_id="user-1", full_name="Jane Doe")
            )

    def test_other_conflicts_are_not_retried(self) -> None:
        storage = OrphanPortfolioStorage()
        storage.insert(USERS, {"id": "user-1", "email": "jane@example.com", "created_at": T0})

        with pytest.raises(StorageConflictError):
            SaveProfileUseCase(PortfolioService(storage), slug_retry_attempts=3).execute(
                SaveProfileCommand(user_id="user-1", full_name="Jane Doe")
            )
        assert storage.portfolio_inserts == 1

    def test_profile_links_saved_on_user(self, portfolios) -> None:
        use_case = SaveProfileUseCase(portfolios)
        use_case.execute(
            SaveProfileCommand(
                user_id="user-1",
                full_name="Jane Doe",
                artist_type="painter",
                website=" https://jane.example.com ",
                instagram="janepaints",
            )
        )
        use_case.execute(SaveProfileCommand(user_id="user-1", instagram=""))

        user = portfolios.get_user_profile("user-1")
        assert user.artist_type == "painter"
        assert user.website == "https://jane.example.com"
        assert user.instagram is None
        assert user.twitter is None


# ══════════════════════════════════════════════════════════════════════
# SaveImagesUseCase / UploadArtworkUseCase
# ══════════════════════════════════════════════════════════════════════


class TestSaveImagesUseCase:
    """Tests for non-atomic batch image saves."""

    def test_all_saved(self, portfolios) -> None:
        result = SaveImagesUseCase(portfolios).execute(
            SaveImagesCommand(image_urls=["https://x/1", "https://x/2"], user_id="user-1")
        )
        assert result.complete
        assert [i.image_url for i in result.saved] == ["https://x/1", "https://x/2"]

    def test_partial_failure_keeps_other_images(self) -> None:
        storage = FailingInsertStorage({"https://x/2"})
        service = PortfolioService(storage)

        result = SaveImagesUseCase(service).execute(
            SaveImagesCommand(
                image_urls=["https://x/1", "https://x/2", "https://x/3"], user_id="user-1"
            )
        )

        assert [i.image_url for i in result.saved] == ["https://x/1", "https://x/3"]
        assert [f.image_url for f in result.failures] == ["https://x/2"]
        assert not result.complete
        stored = {i.image_url for i in service.get_images_for_user("user-1")}
        assert stored == {"https://x/1", "https://x/3"}

    def test_blank_url_reported_as_failure(self, portfolios) -> None:
        result = SaveImagesUseCase(portfolios).execute(
            SaveImagesCommand(image_urls=["", "https://x/1"], user_id="user-1")
        )
        assert len(result.saved) == 1
        assert "image_url is required" in result.failures[0].reason

    def test_own_portfolio_accepted(self, portfolios) -> None:
        mine = portfolios.create_portfolio(CreatePortfolioCommand(user_id="user-1", title="Jane"))
        result = SaveImagesUseCase(portfolios).execute(
            SaveImagesCommand(image_urls=["https://x/1"], user_id="user-1", portfolio_id=mine.id)
        )
        assert [i.portfolio_id for i in result.saved] == [mine.id]

    @pytest.mark.parametrize("portfolio_id", ["theirs", "missing"])
    def test_foreign_or_missing_portfolio_rejected(self, portfolios, portfolio_id) -> None:
        """Nothing is saved against a portfolio the user does not own."""
        theirs = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane")
        )
        target = theirs.id if portfolio_id == "theirs" else "missing"

        with pytest.raises(PortfolioNotFoundError):
            SaveImagesUseCase(portfolios).execute(
                SaveImagesCommand(
                    image_urls=["https://evil/x.png"], user_id="user-2", portfolio_id=target
                )
            )
        assert portfolios.get_images_for_portfolio(theirs.id) == []
        assert portfolios.get_images_for_user("user-2") == []


class TestUploadArtworkUseCase:
    """Tests for uploading artwork and saving the hosted URLs."""

    def _use_case(self, portfolios, file_host) -> UploadArtworkUseCase:
        return UploadArtworkUseCase(
            file_host, SaveImagesUseCase(portfolios), allowed_types=ALLOWED, max_size_bytes=100
        )

    def test_uploads_and_saves(self, portfolios, file_host) -> None:
        result = self._use_case(portfolios, file_host).execute(
            UploadArtworkCommand(files=[_png("a.png"), _png("b.png")], user_id="user-1")
        )
        assert [i.image_url for i in result.saved] == [
            "https://cdn.example.com/a.png",
            "https://cdn.example.com/b.png",
        ]
        assert file_host.upload.call_count == 2

    def test_rejected_files_never_uploaded(self, portfolios, file_host) -> None:
        files = [
            UploadedFile("doc.pdf", b"x", "application/pdf"),
            _png("big.png", size=101),
            _png("empty.png", size=0),
            _png("ok.png"),
        ]
        result = self._use_case(portfolios, file_host).execute(
            UploadArtworkCommand(files=files, user_id="user-1")
        )
        assert [i.image_url for i in result.saved] == ["https://cdn.example.com/ok.png"]
        assert [f.image_url for f in result.failures] == ["doc.pdf", "big.png", "empty.png"]
        assert file_host.upload.call_count == 1

    def test_host_failure_reported(self, portfolios, file_host) -> None:
        file_host.upload.side_effect = FileHostingError("a.png", "timeout")
        result = self._use_case(portfolios, file_host).execute(
            UploadArtworkCommand(files=[_png("a.png")], user_id="user-1")
        )
        assert result.saved == []
        assert result.failures[0].reason == "timeout"

    def test_foreign_portfolio_rejected_before_upload(self, portfolios, file_host) -> None:
        theirs = portfolios.create_portfolio(
            CreatePortfolioCommand(user_id="user-1", title="Jane")
        )
        with pytest.raises(PortfolioNotFoundError):
            self._use_case(portfolios, file_host).execute(
                UploadArtworkCommand(files=[_png()], user_id="user-2", portfolio_id=theirs.id)
            )
        file_host.upload.assert_not_called()

    def test_check_upload(self) -> None:
        assert check_upload(_png(), ALLOWED, 100) is None
        assert "unsupported" in check_upload(UploadedFile("a", b"x", "text/plain"), ALLOWED, 100)


class TestUpdateProfilePictureUseCase:
    """Tests for replacing the profile picture."""

    def _use_case(self, portfolios, file_host) -> UpdateProfilePictureUseCase:
        return UpdateProfilePictureUseCase(
            portfolios, file_host, allowed_types=ALLOWED, max_size_bytes=100
        )

    def test_sets_profile_image_url(self, portfolios, file_host) -> None:
        user = self._use_case(portfolios, file_host).execute(
            UpdateProfilePictureCommand(file=_png("me.png"), user_id="user-1")
        )
        assert user.profile_image_url == "https://cdn.example.com/me.png"

    def test_invalid_file_rejected(self, portfolios, file_host) -> None:
        with pytest.raises(InvalidImageError):
            self._use_case(portfolios, file_host).execute(
                UpdateProfilePictureCommand(
                    file=UploadedFile("me.txt", b"x", "text/plain"), user_id="user-1"
                )
            )
        file_host.upload.assert_not_called()

    def test_unknown_user_rejected(self, portfolios, file_host) -> None:
        with pytest.raises(UserNotFoundError):
            self._use_case(portfolios, file_host).execute(
                UpdateProfilePictureCommand(file=_png(), user_id="ghost")
            )


# ══════════════════════════════════════════════════════════════════════
# EventService
# ══════════════════════════════════════════════════════════════════════


class TestEventService:
    """Tests for listing, adding and deleting events."""

    def test_add_and_list_by_date(self, memory) -> None:
        service = EventService(memory)
        service.add_event(
            AddEventCommand("user-1", "Late show", date(2024, 9, 1), "Paris")
        )
        service.add_event(
            AddEventCommand(
                "user-1",
                " Workshop ",
                date(2024, 4, 1),
                " Lyon ",
                event_type=EventType.WORKSHOP,
            )
        )
        events = service.list_events("user-1")
        assert [e.title for e in events] == ["Workshop", "Late show"]
        assert events[0].location == "Lyon"
        assert events[0].event_type is EventType.WORKSHOP
        assert events[1].event_type is EventType.PERFORMANCE

    def test_missing_fields_rejected(self, memory) -> None:
        with pytest.raises(InvalidEventError) as exc_info:
            EventService(memory).add_event(AddEventCommand("user-1", " ", None, ""))
        assert "title" in exc_info.value.reason
        assert "event_date" in exc_info.value.reason
        assert "location" in exc_info.value.reason

    def test_delete_scoped_to_owner(self, memory) -> None:
        service = EventService(memory)
        event = service.add_event(AddEventCommand("user-1", "Show", date(2024, 9, 1), "Paris"))
        assert service.delete_event(event.id, "user-2") is False
        assert service.delete_event(event.id, "user-1") is True
        assert service.list_events("user-1") == []
