"""
API Routes - FastAPI endpoints for reader access checks and overlay clicks.

NO DICTIONARIES - All requests/responses use Pydantic models.
"""

from uuid import uuid4

import httpx
from fastapi import APIRouter, Depends, HTTPException, Response, status
from structlog import get_logger

from paywall_access.api.dependencies import get_http_client, get_session_registry
from paywall_access.config import settings
from paywall_access.exceptions import (
    AuthorizationTimeoutError,
    ContainerNotFoundError,
    NoMatchingConfigurationError,
    UnexpectedStatusError,
)
from paywall_access.models.api import (
    AuthorizeRequest,
    AuthorizeResponse,
    ClickRequest,
    ClickResponse,
    ClickTarget,
)
from paywall_access.models.domain import ReaderContext
from paywall_access.observability.logging import log_context
from paywall_access.services.session_registry import (
    ReaderSession,
    ReaderSessionRegistry,
    create_reader_session,
)

logger = get_logger(__name__)
router = APIRouter()


def _session_matches(session: ReaderSession, request: AuthorizeRequest) -> bool:
    return (
        session.access_source.reader.canonical_url == request.canonical_url
        and session.vendor.config == request.adapter_config
    )


def _get_session_or_404(registry: ReaderSessionRegistry, reader_id: str) -> ReaderSession:
    session = registry.get(reader_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown reader",
        )
    return session


@router.post("/v1/access/authorize", response_model=AuthorizeResponse)
async def authorize_reader(
    request: AuthorizeRequest,
    registry: ReaderSessionRegistry = Depends(get_session_registry),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> AuthorizeResponse:
    """
    Ask the vendor whether a reader may view an article.

    When access is denied, the purchase overlay is rendered and returned as
    HTML. The reader session is kept so later clicks reach the same overlay.
    """
    reader_id = request.reader_id or f"amp-{uuid4().hex}"

    reader = ReaderContext(
        canonical_url=request.canonical_url,
        reader_id=reader_id,
        return_url=request.return_url,
        auth_data=request.auth_data,
    )

    session = registry.get(reader_id)
    if session is None or not _session_matches(session, request):
        session = create_reader_session(
            reader,
            request.adapter_config,
            http_client,
            cookies=request.cookies,
            authorization_timeout=settings.authorization_timeout_seconds,
        )
        registry.put(session)
    else:
        # Same article and config: keep the overlay, refresh per-request reader values
        session.access_source.reader = reader
        session.xhr.reader_cookies = dict(request.cookies)

    with log_context(reader_id=reader_id):
        try:
            result = await session.vendor.authorize()

        except NoMatchingConfigurationError as exc:
            logger.warning("no_matching_configuration", canonical_url=request.canonical_url)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(exc),
            ) from exc

        except AuthorizationTimeoutError as exc:
            raise HTTPException(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                detail="Vendor authorization timed out",
            ) from exc

        except UnexpectedStatusError as exc:
            logger.error("vendor_unexpected_status", status=exc.status_code)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Vendor returned status {exc.status_code}",
            ) from exc

        except httpx.HTTPError as exc:
            logger.error("vendor_unreachable", error=str(exc))
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Vendor unreachable",
            ) from exc

        except ContainerNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc

        logger.info("authorization_completed", access=result.access)

    return AuthorizeResponse(
        reader_id=reader_id,
        access=result.access,
        overlay_html=result.overlay_html,
    )


@router.post("/v1/access/{reader_id}/click", response_model=ClickResponse)
async def click_overlay(
    reader_id: str,
    request: ClickRequest,
    registry: ReaderSessionRegistry = Depends(get_session_registry),
) -> ClickResponse:
    """
    Deliver a reader's click on the purchase overlay.

    Returns the vendor URL the reader should be redirected to.
    """
    session = _get_session_or_404(registry, reader_id)

    state = session.vendor.state
    if request.target == ClickTarget.PURCHASE:
        button = state.purchase_button
    else:
        button = state.already_purchased_button

    if button is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No purchase overlay rendered for this reader",
        )

    with log_context(reader_id=reader_id):
        redirects_before = len(session.redirects)
        event = await button.click()
        redirect_url = (
            session.redirects[-1] if len(session.redirects) > redirects_before else None
        )
        logger.info("overlay_clicked", target=request.target.value, redirected=bool(redirect_url))

    return ClickResponse(
        reader_id=reader_id,
        target=request.target,
        redirect_url=redirect_url,
        default_prevented=event.default_prevented,
    )


@router.post("/v1/access/{reader_id}/pingback", status_code=status.HTTP_204_NO_CONTENT)
async def pingback(
    reader_id: str,
    registry: ReaderSessionRegistry = Depends(get_session_registry),
) -> Response:
    """Acknowledge that the reader viewed the article."""
    session = _get_session_or_404(registry, reader_id)
    await session.vendor.pingback()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
