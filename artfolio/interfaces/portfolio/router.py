"""
FastAPI router for the portfolio bounded context.

All routes delegate to services and use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile

from artfolio.application.portfolio.dtos import (
    AddEventCommand,
    CreatePortfolioCommand,
    ResolvePortfolioQuery,
    SaveImagesCommand,
    SaveImagesResult,
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
from artfolio.application.portfolio.upload_artwork import UploadArtworkUseCase
from artfolio.core.config import Settings
from artfolio.domain.portfolio.entities import UploadedFile
from artfolio.domain.portfolio.errors import PortfolioNotFoundError, UserNotFoundError
from artfolio.interfaces.portfolio.dependencies import (
    get_current_user_id,
    get_event_service,
    get_portfolio_service,
    get_resolve_portfolio_use_case,
    get_settings,
    get_save_images_use_case,
    get_save_profile_use_case,
    get_update_profile_picture_use_case,
    get_upload_artwork_use_case,
    require_current_user_id,
)
from artfolio.interfaces.portfolio.schemas import (
    AddEventRequest,
    CreatePortfolioRequest,
    ErrorResponse,
    EventResponse,
    ImageFailureItem,
    ImageResponse,
    PortfolioPageResponse,
    PortfolioResponse,
    SaveImagesRequest,
    SaveImagesResponse,
    SaveProfileRequest,
    SlugResponse,
    UpdatePortfolioRequest,
    UpdateUserRequest,
    UserResponse,
)
from artfolio.shared.security.rate_limiting import limiter, upload_rate_limit

router = APIRouter(tags=["portfolio"])

HTTP_201 = 201
HTTP_204 = 204
AUTH_RESPONSES = {401: {"model": ErrorResponse}}


def _to_uploaded_file(upload: UploadFile, max_size_bytes: int) -> UploadedFile:
    # one byte past the limit is enough for the size check to reject the file
    return UploadedFile(
        filename=upload.filename or "upload",
        content=upload.file.read(max_size_bytes + 1),
        content_type=upload.content_type or "application/octet-stream",
    )


def _save_images_response(result: SaveImagesResult) -> SaveImagesResponse:
    return SaveImagesResponse(
        saved=[ImageResponse.model_validate(image) for image in result.saved],
        failures=[ImageFailureItem.model_validate(f) for f in result.failures],
    )


# ------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------


@router.get(
    "/users/me",
    response_model=UserResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Get my profile",
)
def get_my_profile(
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> UserResponse:
    """Return the current user's profile."""
    user = service.get_user_profile(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/users/me",
    response_model=UserResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Update my profile",
)
def update_my_profile(
    request: UpdateUserRequest,
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> UserResponse:
    """Apply a sparse update to the current user's profile."""
    user = service.update_user_profile(user_id, request.model_dump(exclude_unset=True))
    if user is None:
        raise UserNotFoundError(user_id)
    return UserResponse.model_validate(user)


@router.post(
    "/users/me/profile-picture",
    response_model=UserResponse,
    responses={**AUTH_RESPONSES, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Upload a profile picture",
)
@limiter.limit(upload_rate_limit)
def upload_profile_picture(
    request: Request,
    file: UploadFile = File(...),
    user_id: str = Depends(require_current_user_id),
    use_case: UpdateProfilePictureUseCase = Depends(get_update_profile_picture_use_case),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    """Publish a new profile picture and store its URL."""
    user = use_case.execute(
        UpdateProfilePictureCommand(
            file=_to_uploaded_file(file, settings.max_upload_size_bytes), user_id=user_id
        )
    )
    return UserResponse.model_validate(user)


@router.get(
    "/users/me/portfolio",
    response_model=PortfolioResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Get my portfolio",
)
def get_my_portfolio(
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Return the current user's portfolio."""
    portfolio = service.get_user_portfolio(user_id)
    if portfolio is None:
        raise PortfolioNotFoundError(user_id)
    return PortfolioResponse.model_validate(portfolio)


@router.put(
    "/users/me/portfolio",
    response_model=PortfolioResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Save my profile and portfolio",
    description="Creates the portfolio on first save and updates it afterwards.",
)
def save_my_profile(
    request: SaveProfileRequest,
    user_id: str = Depends(require_current_user_id),
    use_case: SaveProfileUseCase = Depends(get_save_profile_use_case),
) -> PortfolioResponse:
    """Save the dashboard profile form."""
    portfolio = use_case.execute(
        SaveProfileCommand(
            user_id=user_id,
            full_name=request.full_name,
            bio=request.bio,
            slug=request.slug,
            is_public=request.is_public,
            artist_type=request.artist_type,
            website=request.website,
            instagram=request.instagram,
            twitter=request.twitter,
        )
    )
    return PortfolioResponse.model_validate(portfolio)


@router.get(
    "/users/me/images",
    response_model=list[ImageResponse],
    responses=AUTH_RESPONSES,
    summary="List my images",
)
def list_my_images(
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[ImageResponse]:
    """Return the current user's images, oldest first."""
    return [ImageResponse.model_validate(i) for i in service.get_images_for_user(user_id)]


@router.post(
    "/users/me/images",
    response_model=SaveImagesResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Save hosted image URLs",
    description=(
        "Saves each URL as an image. Failed URLs are listed in `failures`. "
        "A `portfolio_id` must name one of your own portfolios."
    ),
)
def save_my_images(
    request: SaveImagesRequest,
    user_id: str = Depends(require_current_user_id),
    use_case: SaveImagesUseCase = Depends(get_save_images_use_case),
) -> SaveImagesResponse:
    """Save a batch of image URLs for the current user."""
    result = use_case.execute(
        SaveImagesCommand(
            image_urls=request.image_urls,
            user_id=user_id,
            portfolio_id=request.portfolio_id,
        )
    )
    return _save_images_response(result)


@router.post(
    "/users/me/images/upload",
    response_model=SaveImagesResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}},
    summary="Upload artwork",
    description="Uploads image files to the file host and saves them as images.",
)
@limiter.limit(upload_rate_limit)
def upload_my_artwork(
    request: Request,
    files: list[UploadFile] = File(...),
    portfolio_id: Optional[str] = Form(None),
    user_id: str = Depends(require_current_user_id),
    use_case: UploadArtworkUseCase = Depends(get_upload_artwork_use_case),
    settings: Settings = Depends(get_settings),
) -> SaveImagesResponse:
    """Upload artwork files for the current user."""
    result = use_case.execute(
        UploadArtworkCommand(
            files=[_to_uploaded_file(f, settings.max_upload_size_bytes) for f in files],
            user_id=user_id,
            portfolio_id=portfolio_id,
        )
    )
    return _save_images_response(result)


@router.delete(
    "/users/me/images/{image_id}",
    status_code=HTTP_204,
    response_class=Response,
    responses=AUTH_RESPONSES,
    summary="Delete one of my images",
)
def delete_my_image(
    image_id: str,
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> Response:
    """Delete an image owned by the current user. Missing ids are ignored."""
    service.delete_image(image_id, user_id=user_id)
    return Response(status_code=HTTP_204)


@router.get(
    "/users/me/events",
    response_model=list[EventResponse],
    responses=AUTH_RESPONSES,
    summary="List my events",
)
def list_my_events(
    user_id: str = Depends(require_current_user_id),
    service: EventService = Depends(get_event_service),
) -> list[EventResponse]:
    """Return the current user's events by date."""
    return [EventResponse.model_validate(e) for e in service.list_events(user_id)]


@router.post(
    "/users/me/events",
    status_code=HTTP_201,
    response_model=EventResponse,
    responses={**AUTH_RESPONSES, 422: {"model": ErrorResponse}},
    summary="Add an event",
)
def add_my_event(
    request: AddEventRequest,
    user_id: str = Depends(require_current_user_id),
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """List a workshop, performance or exhibition."""
    event = service.add_event(
        AddEventCommand(
            user_id=user_id,
            title=request.title,
            event_date=request.event_date,
            location=request.location,
            description=request.description,
            event_type=request.event_type,
        )
    )
    return EventResponse.model_validate(event)


@router.delete(
    "/users/me/events/{event_id}",
    status_code=HTTP_204,
    response_class=Response,
    responses=AUTH_RESPONSES,
    summary="Delete one of my events",
)
def delete_my_event(
    event_id: str,
    user_id: str = Depends(require_current_user_id),
    service: EventService = Depends(get_event_service),
) -> Response:
    """Delete an event owned by the current user."""
    service.delete_event(event_id, user_id)
    return Response(status_code=HTTP_204)


# ------------------------------------------------------------------
# Portfolios
# ------------------------------------------------------------------


@router.post(
    "/portfolios",
    status_code=HTTP_201,
    response_model=PortfolioResponse,
    responses={**AUTH_RESPONSES, 409: {"model": ErrorResponse}},
    summary="Create a portfolio",
)
def create_portfolio(
    request: CreatePortfolioRequest,
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Create a portfolio owned by the current user."""
    portfolio = service.create_portfolio(
        CreatePortfolioCommand(
            user_id=user_id,
            title=request.title,
            description=request.description,
            slug=request.slug,
            is_public=request.is_public,
        )
    )
    return PortfolioResponse.model_validate(portfolio)


@router.patch(
    "/portfolios/{portfolio_id}",
    response_model=PortfolioResponse,
    responses={**AUTH_RESPONSES, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Update a portfolio",
    description="Only the owner may update a portfolio; others get 404.",
)
def update_portfolio(
    portfolio_id: str,
    request: UpdatePortfolioRequest,
    user_id: str = Depends(require_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """Apply a sparse update to one of the current user's portfolios."""
    existing = service.get_portfolio_by_id(portfolio_id)
    if existing is None or existing.user_id != user_id:
        raise PortfolioNotFoundError(portfolio_id)

    portfolio = service.update_portfolio(portfolio_id, request.model_dump(exclude_unset=True))
    if portfolio is None:
        raise PortfolioNotFoundError(portfolio_id)
    return PortfolioResponse.model_validate(portfolio)


@router.get(
    "/portfolios/{identifier}",
    response_model=PortfolioPageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a portfolio page",
    description="Resolves a slug, a portfolio id or the `my-portfolio` alias.",
)
def get_portfolio_page(
    identifier: str,
    current_user_id: Optional[str] = Depends(get_current_user_id),
    use_case: ResolvePortfolioUseCase = Depends(get_resolve_portfolio_use_case),
) -> PortfolioPageResponse:
    """Return a portfolio with its owner, images and events."""
    page = use_case.execute(
        ResolvePortfolioQuery(identifier=identifier, current_user_id=current_user_id)
    )
    return PortfolioPageResponse.model_validate(page)


@router.get(
    "/portfolios/{portfolio_id}/images",
    response_model=list[ImageResponse],
    responses={404: {"model": ErrorResponse}},
    summary="List a portfolio's images",
    description="Private portfolios answer 404 to everyone but their owner.",
)
def list_portfolio_images(
    portfolio_id: str,
    current_user_id: Optional[str] = Depends(get_current_user_id),
    service: PortfolioService = Depends(get_portfolio_service),
) -> list[ImageResponse]:
    """Return the images attached to a portfolio, oldest first."""
    portfolio = service.get_portfolio_by_id(portfolio_id)
    if portfolio is None or not portfolio.visible_to(current_user_id):
        raise PortfolioNotFoundError(portfolio_id)
    return [
        ImageResponse.model_validate(i)
        for i in service.get_images_for_portfolio(portfolio_id)
    ]


@router.get(
    "/slugs",
    response_model=SlugResponse,
    summary="Suggest a unique slug",
)
def suggest_slug(
    base: str = Query(..., min_length=1, max_length=255),
    service: PortfolioService = Depends(get_portfolio_service),
) -> SlugResponse:
    """Return a slug for ``base`` that is currently free."""
    return SlugResponse(base=base, slug=service.generate_unique_slug(base))
