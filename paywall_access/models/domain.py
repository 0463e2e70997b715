"""
Domain Models - Internal adapter models using dataclasses.

NO DICTIONARIES - All data structures are strongly typed dataclasses.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paywall_access.services.dom import Element

DEFAULT_BUTTON = "Unlock Article"
DEFAULT_ALREADY_PURCHASED_LINK = "I already bought this"


class PurchaseMode(str, Enum):
    """Which overlay control started a purchase handoff."""

    PURCHASE = "purchase"
    ALREADY_PURCHASED = "alreadyPurchased"


@dataclass(frozen=True)
class AccessResult:
    """
    Outcome of an authorization call.

    On denial, overlay_html is the overlay markup as rendered by this call.
    """

    access: bool
    overlay_html: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class LocaleMessages:
    """Display text for the overlay controls."""

    default_button: str = DEFAULT_BUTTON
    already_purchased_link: str = DEFAULT_ALREADY_PURCHASED_LINK

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, str] | None) -> "LocaleMessages":
        """Overlay integrator overrides (camelCase keys) onto the defaults."""
        overrides = overrides or {}
        return cls(
            default_button=overrides.get("defaultButton", DEFAULT_BUTTON),
            already_purchased_link=overrides.get(
                "alreadyPurchasedLink", DEFAULT_ALREADY_PURCHASED_LINK
            ),
        )


@dataclass(frozen=True)
class ReaderContext:
    """Values the URL decorator substitutes into vendor URLs."""

    canonical_url: str
    reader_id: str
    return_url: str
    auth_data: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.canonical_url:
            raise ValueError("canonical_url cannot be empty")
        if not self.reader_id:
            raise ValueError("reader_id cannot be empty")


@dataclass
class RenderState:
    """
    Overlay state owned by one adapter instance.

    At most one overlay exists at a time; disposers are called exactly once
    when the container is emptied.
    """

    empty: bool = True
    inner_container: "Element | None" = None
    purchase_button: "Element | None" = None
    already_purchased_button: "Element | None" = None
    purchase_button_listener: Callable[[], None] | None = None
    already_purchased_listener: Callable[[], None] | None = None

    @property
    def listener_count(self) -> int:
        return sum(
            1
            for disposer in (self.purchase_button_listener, self.already_purchased_listener)
            if disposer is not None
        )
