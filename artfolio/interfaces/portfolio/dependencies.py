"""
Dependency injection for the portfolio bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into services and use cases via constructor injection.
The storage adapter and file host are built once in ``create_app``
and read from ``app.state``; everything else is built per request.
"""

from typing import Optional

from fastapi import Depends, Request

from artfolio.application.portfolio.event_service import EventService
from artfolio.application.portfolio.portfolio_service import PortfolioService
from artfolio.application.portfolio.resolve_portfolio import ResolvePortfolioUseCase
from artfolio.application.portfolio.save_images import SaveImagesUseCase
from artfolio.application.portfolio.save_profile import SaveProfileUseCase
from artfolio.application.portfolio.update_profile_picture import (
    UpdateProfilePictureUseCase,
)
from artfolio.application.portfolio.upload_artwork import UploadArtworkUseCase
from artfolio.core.config import Settings
from artfolio.domain.portfolio.errors import NotAuthenticatedError
from artfolio.domain.portfolio.ports import FileHostingPort, IdentityPort, StorageGateway
from artfolio.infrastructure.portfolio.identity import HeaderIdentityAdapter


def get_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return request.app.state.settings


def get_storage(request: Request) -> StorageGateway:
    """Return the application's storage adapter."""
    return request.app.state.storage


def get_file_host(request: Request) -> FileHostingPort:
    """Return the application's file-hosting adapter."""
    return request.app.state.file_host


def get_identity(
    request: Request, settings: Settings = Depends(get_settings)
) -> IdentityPort:
    """Build the identity adapter for this request."""
    return HeaderIdentityAdapter(
        request.headers,
        header_name=settings.user_id_header,
        fallback_user_id=settings.dev_user_id,
    )


def get_current_user_id(
    identity: IdentityPort = Depends(get_identity),
) -> Optional[str]:
    """Return the requester's user id, or None when anonymous."""
    return identity.current_user_id()


def require_current_user_id(
    user_id: Optional[str] = Depends(get_current_user_id),
) -> str:
    """Return the requester's user id.

    Raises:
        NotAuthenticatedError: If the request carries no user id.
    """
    if not user_id:
        raise NotAuthenticatedError()
    return user_id


def get_portfolio_service(
    storage: StorageGateway = Depends(get_storage),
    identity: IdentityPort = Depends(get_identity),
    settings: Settings = Depends(get_settings),
) -> PortfolioService:
    """Build PortfolioService with its infrastructure dependencies."""
    return PortfolioService(
        storage=storage,
        identity=identity,
        slug_suffix_length=settings.slug_suffix_length,
    )


def get_event_service(storage: StorageGateway = Depends(get_storage)) -> EventService:
    """Build EventService with its infrastructure dependencies."""
    return EventService(storage=storage)


def get_resolve_portfolio_use_case(
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
    event_service: EventService = Depends(get_event_service),
    settings: Settings = Depends(get_settings),
) -> ResolvePortfolioUseCase:
    """Build ResolvePortfolioUseCase with its dependencies."""
    return ResolvePortfolioUseCase(
        portfolio_service=portfolio_service,
        event_service=event_service,
        my_portfolio_alias=settings.my_portfolio_alias,
    )


def get_save_profile_use_case(
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
    settings: Settings = Depends(get_settings),
) -> SaveProfileUseCase:
    """Build SaveProfileUseCase with its dependencies."""
    return SaveProfileUseCase(
        portfolio_service=portfolio_service,
        slug_retry_attempts=settings.slug_retry_attempts,
    )


def get_save_images_use_case(
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> SaveImagesUseCase:
    """Build SaveImagesUseCase with its dependencies."""
    return SaveImagesUseCase(portfolio_service=portfolio_service)


def get_upload_artwork_use_case(
    file_host: FileHostingPort = Depends(get_file_host),
    save_images: SaveImagesUseCase = Depends(get_save_images_use_case),
    settings: Settings = Depends(get_settings),
) -> UploadArtworkUseCase:
    """Build UploadArtworkUseCase with its dependencies."""
    return UploadArtworkUseCase(
        file_host=file_host,
        save_images=save_images,
        allowed_types=settings.allowed_image_types,
        max_size_bytes=settings.max_upload_size_bytes,
    )


def get_update_profile_picture_use_case(
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
    file_host: FileHostingPort = Depends(get_file_host),
    settings: Settings = Depends(get_settings),
) -> UpdateProfilePictureUseCase:
    """Build UpdateProfilePictureUseCase with its dependencies."""
    return UpdateProfilePictureUseCase(
        portfolio_service=portfolio_service,
        file_host=file_host,
        allowed_types=settings.allowed_image_types,
        max_size_bytes=settings.max_upload_size_bytes,
    )
