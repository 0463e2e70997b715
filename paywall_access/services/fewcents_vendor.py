"""
Fewcents Access Vendor - paywall adapter for the Fewcents micropayment service.

Asks the vendor whether the reader may view an article, renders a purchase
overlay when payment is required, and hands purchase / "already purchased"
clicks off to the vendor through the access source.
"""

import asyncio
import math
import time
from decimal import Decimal
from functools import partial
from urllib.parse import quote

import httpx
from babel.core import UnknownLocaleError
from babel.numbers import format_currency
from structlog import get_logger

from paywall_access.config import settings
from paywall_access.exceptions import (
    AuthorizationTimeoutError,
    ContainerNotFoundError,
    MalformedPurchaseConfigError,
    NoMatchingConfigurationError,
    UnexpectedStatusError,
)
from paywall_access.models.domain import (
    AccessResult,
    LocaleMessages,
    PurchaseMode,
    RenderState,
)
from paywall_access.models.vendor import AdapterConfig, Price, PurchaseConfig, parse_purchase_config
from paywall_access.observability.metrics import metrics
from paywall_access.observability.tracing import trace_operation
from paywall_access.services.dom import Element, Event, listen, remove_children
from paywall_access.services.ports import AccessSource, ElementHost, JsonFetcher, MutationScheduler
from paywall_access.services.styles import CSS, TAG, install_styles_for_doc

logger = get_logger(__name__)

CONFIG_BASE_PATH = (
    "/api/v1/amp/?"
    "article_url=CANONICAL_URL"
    "&amp_reader_id=READER_ID"
    "&return_url=RETURN_URL"
)
AUTHORIZATION_TIMEOUT = 3.0  # seconds

DEFAULT_LOCALE = "en"
PRICE_PLACEHOLDER = "--"


def format_price(price: Price | None, locale: str) -> str:
    """Format a price as currency for `locale`; missing fields give a placeholder."""
    if price is None or price.amount is None or not price.currency:
        return PRICE_PLACEHOLDER
    if not math.isfinite(price.amount):
        return PRICE_PLACEHOLDER

    amount = Decimal(str(price.amount))
    currency = price.currency.upper()
    try:
        return format_currency(amount, currency, locale=locale.replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        return format_currency(amount, currency, locale=DEFAULT_LOCALE)


class FewcentsVendor:
    """
    Paywall access vendor for Fewcents.

    One instance serves one reader on one article. Authorization calls are
    serialized: a second call waits until the first has rendered or failed,
    so the latest denial always wins.
    """

    def __init__(
        self,
        access_source: AccessSource,
        document: ElementHost,
        xhr: JsonFetcher,
        vsync: MutationScheduler,
        authorization_timeout: float = AUTHORIZATION_TIMEOUT,
    ) -> None:
        self.access_source = access_source
        self.document = document
        self.xhr = xhr
        self.vsync = vsync
        self.authorization_timeout = authorization_timeout

        self.config = AdapterConfig.model_validate(access_source.get_adapter_config())
        self.current_locale = self.config.locale or DEFAULT_LOCALE
        self.i18n = LocaleMessages.from_overrides(self.config.locale_messages)

        self.purchase_config: PurchaseConfig | None = None
        self.purchase_config_error: MalformedPurchaseConfigError | None = None
        self.state = RenderState()
        self._authorize_lock = asyncio.Lock()
        self._pending_empty: asyncio.Future[None] | None = None

        self.purchase_config_base_url = self._get_config_url().rstrip("/") + CONFIG_BASE_PATH
        if self.config.article_id:
            article_id = quote(self.config.article_id, safe="")
            self.purchase_config_base_url += "&article_id=" + article_id

        install_styles_for_doc(document, CSS, TAG)

    def _get_config_url(self) -> str:
        return self.config.config_url or settings.fewcents_config_url

    async def authorize(self) -> AccessResult:
        """
        Check reader access with the vendor.

        Returns:
            AccessResult(access=True) when the vendor grants access,
            AccessResult(access=False, overlay_html=...) after rendering the
            purchase overlay

        Raises:
            NoMatchingConfigurationError: Vendor answered 204
            AuthorizationTimeoutError: Vendor did not answer in time
            UnexpectedStatusError: Any other non-2xx status (re-raised as is)
        """
        async with self._authorize_lock:
            start_time = time.perf_counter()
            with trace_operation("fewcents.authorize", article_id=self.config.article_id):
                try:
                    result = await self._authorize()
                except NoMatchingConfigurationError:
                    metrics.record_authorization("no_config", time.perf_counter() - start_time)
                    raise
                except AuthorizationTimeoutError:
                    metrics.record_authorization("timeout", time.perf_counter() - start_time)
                    raise
                except Exception as e:
                    metrics.record_authorization("error", time.perf_counter() - start_time)
                    metrics.record_error(type(e).__name__, "authorize")
                    raise

            outcome = "granted" if result.access else "denied"
            metrics.record_authorization(outcome, time.perf_counter() - start_time)
            return result

    async def _authorize(self) -> AccessResult:
        try:
            response = await self._get_purchase_config()
        except UnexpectedStatusError as e:
            if e.status_code != 402:
                raise
            self.purchase_config, self.purchase_config_error = parse_purchase_config(
                e.response.content
            )
            if self.purchase_config_error is not None:
                logger.warning(
                    "purchase_config_malformed", reason=self.purchase_config_error.reason
                )

            # Empty before rendering in case authorization runs again with the same state
            await self.empty_container()
            self.render_purchase_overlay()
            return AccessResult(access=False, overlay_html=self.render_container().inner_html)

        if response.status_code == 204:
            raise NoMatchingConfigurationError(article_id=self.config.article_id)

        await self.empty_container()
        return AccessResult(access=True)

    async def _get_purchase_config(self) -> httpx.Response:
        url = await self.access_source.build_url(
            self.purchase_config_base_url, use_auth_data=False
        )
        url = await self.access_source.get_login_url(url)
        logger.info("authorization_url_built", url=url)

        try:
            async with asyncio.timeout(self.authorization_timeout):
                return await self.xhr.fetch_json(url, credentials="include")
        except TimeoutError as e:
            logger.warning("authorization_timeout", timeout_seconds=self.authorization_timeout)
            raise AuthorizationTimeoutError(self.authorization_timeout) from e

    def _create_element(self, tag: str, class_name: str = "", text: str = "") -> Element:
        element = self.document.create_element(tag)
        element.class_name = class_name
        element.text_content = text
        return element

    def get_container(self) -> Element:
        element_id = f"{TAG}-dialog"
        container = self.document.get_element_by_id(element_id)
        if container is None:
            raise ContainerNotFoundError(element_id)
        return container

    def render_container(self) -> Element:
        """Return the dialog container the overlay renders into."""
        return self.get_container()

    async def empty_container(self) -> None:
        """Remove the overlay and dispose its listeners. No-op when already empty."""
        if self.state.empty:
            return
        # A removal batch is already queued
        if self._pending_empty is not None:
            await asyncio.shield(self._pending_empty)
            return

        if self.state.purchase_button_listener:
            self.state.purchase_button_listener()
            self.state.purchase_button_listener = None
        if self.state.already_purchased_listener:
            self.state.already_purchased_listener()
            self.state.already_purchased_listener = None

        def mutate() -> None:
            self.state.empty = True
            self.state.inner_container = None
            self.state.purchase_button = None
            self.state.already_purchased_button = None
            remove_children(self.get_container())

        self._pending_empty = asyncio.ensure_future(self.vsync.mutate_promise(mutate))
        try:
            await asyncio.shield(self._pending_empty)
        finally:
            self._pending_empty = None

    def render_purchase_overlay(self) -> None:
        """Build the purchase overlay inside the dialog container."""
        dialog_container = self.get_container()
        config = self.purchase_config
        inner = self._create_element("div", f"{TAG}-container")

        left = self._create_element("div", f"{TAG}-left-container")
        left.append_child(self._create_element("div", f"{TAG}-left-logo-container"))

        right = self._create_element("div", f"{TAG}-right-container")
        logo = self._create_element("div", f"{TAG}-logo-container")
        logo.append_child(self._create_element("div", f"{TAG}-fc-logo-container", "Few¢ents"))
        right.append_child(logo)

        right.append_child(
            self._create_element(
                "div", f"{TAG}-description-container", "Get access to premium content now!"
            )
        )
        right.append_child(
            self._create_element(
                "div",
                f"{TAG}-subDescription-container",
                "One login. Many publishers. No subscription.",
            )
        )
        price = format_price(config.price if config else None, self.current_locale)
        right.append_child(self._create_element("div", f"{TAG}-price", f"{price}/article"))

        inner.append_child(left)
        inner.append_child(right)

        purchase_button = self._create_element(
            "button", f"{TAG}-purchase-button primary", self.i18n.default_button
        )
        purchase_url = config.purchase_url if config else None
        self.state.purchase_button = purchase_button
        self.state.purchase_button_listener = listen(
            purchase_button,
            "click",
            lambda ev: self.handle_purchase(ev, purchase_url, PurchaseMode.PURCHASE),
        )

        buttons = self._create_element("div", f"{TAG}-buttons-container")
        buttons.append_child(purchase_button)
        buttons.append_child(
            self.create_already_purchased_link(config.identify_url if config else None)
        )
        right.append_child(buttons)

        dialog_container.append_child(inner)
        self.state.inner_container = inner
        self.state.empty = False

    def create_already_purchased_link(self, href: str | None) -> Element:
        button = self._create_element(
            "button", f"{TAG}-purchase-button", self.i18n.already_purchased_link
        )
        self.state.already_purchased_button = button
        self.state.already_purchased_listener = listen(
            button,
            "click",
            partial(self._on_already_purchased, href),
        )
        return button

    async def _on_already_purchased(self, href: str | None, ev: Event) -> str | None:
        return await self.handle_purchase(ev, href, PurchaseMode.ALREADY_PURCHASED)

    async def handle_purchase(
        self,
        ev: Event,
        purchase_url: str | None,
        mode: PurchaseMode = PurchaseMode.PURCHASE,
    ) -> str | None:
        """
        Send the reader to a vendor purchase or identify URL.

        Returns the decorated URL handed to the login flow, or None when the
        overlay had no URL for this control.
        """
        ev.prevent_default()
        if not purchase_url:
            logger.warning("purchase_url_missing", mode=mode.value)
            return None

        url = await self.access_source.build_url(purchase_url, use_auth_data=False)
        logger.debug("purchase_url_built", url=url, mode=mode.value)
        metrics.record_purchase_click(mode.value)
        self.access_source.login_with_url(url)
        return url

    async def pingback(self) -> None:
        """No vendor notification is sent on view."""
        return None
