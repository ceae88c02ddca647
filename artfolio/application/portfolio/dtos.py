"""
Data Transfer Objects for the portfolio application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from artfolio.domain.portfolio.entities import (
    Event,
    EventType,
    Image,
    Portfolio,
    UploadedFile,
    User,
)


@dataclass(frozen=True)
class CreatePortfolioCommand:
    """Input DTO for creating a portfolio.

    Attributes:
        user_id: Owning user.
        title: Page title, usually the artist's name.
        description: Bio shown on the page.
        slug: Public URL slug; must be unique when given.
        is_public: Defaults to True when not supplied.
    """

    user_id: str
    title: str
    description: Optional[str] = None
    slug: Optional[str] = None
    is_public: Optional[bool] = None


@dataclass(frozen=True)
class SaveImageCommand:
    """Input DTO for saving one image row.

    Attributes:
        image_url: Public URL returned by the file host. Required.
        portfolio_id: Optional owning portfolio.
        user_id: Owning user; the current user is used when omitted.
    """

    image_url: str
    portfolio_id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class SaveImagesCommand:
    """Input DTO for saving a batch of image URLs for one owner."""

    image_urls: list[str]
    user_id: Optional[str] = None
    portfolio_id: Optional[str] = None


@dataclass(frozen=True)
class ImageSaveFailure:
    """One image of a batch that could not be saved."""

    image_url: str
    reason: str


@dataclass(frozen=True)
class SaveImagesResult:
    """Output DTO for a batch save.

    The batch is not atomic: ``saved`` holds exactly the images that
    were persisted, ``failures`` the ones that were not.
    """

    saved: list[Image] = field(default_factory=list)
    failures: list[ImageSaveFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class UploadArtworkCommand:
    """Input DTO for uploading artwork files and saving their images."""

    files: list[UploadedFile]
    user_id: str
    portfolio_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateProfilePictureCommand:
    """Input DTO for replacing a user's profile picture."""

    file: UploadedFile
    user_id: str


@dataclass(frozen=True)
class SaveProfileCommand:
    """Input DTO for the profile-save flow.

    Attributes:
        user_id: The user saving their profile.
        full_name: New display name; also used as the page title.
        bio: Portfolio description.
        slug: Requested slug text; made unique before use.
        is_public: Visibility change, left untouched when None.
        artist_type, website, instagram, twitter: Profile links; None
            leaves the stored value, an empty string clears it.
    """

    user_id: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    slug: Optional[str] = None
    is_public: Optional[bool] = None
    artist_type: Optional[str] = None
    website: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None


@dataclass(frozen=True)
class ResolvePortfolioQuery:
    """Input DTO for resolving a path identifier to a portfolio page.

    Attributes:
        identifier: A slug, a portfolio id, or the reserved alias.
        current_user_id: Authenticated requester, if any.
    """

    identifier: str
    current_user_id: Optional[str] = None


@dataclass(frozen=True)
class PortfolioPage:
    """Output DTO with everything a public portfolio page shows."""

    portfolio: Portfolio
    owner: Optional[User]
    images: list[Image]
    events: list[Event]


@dataclass(frozen=True)
class AddEventCommand:
    """Input DTO for listing a new event."""

    user_id: str
    title: str
    event_date: Optional[date]
    location: str
    description: Optional[str] = None
    event_type: EventType = EventType.PERFORMANCE
