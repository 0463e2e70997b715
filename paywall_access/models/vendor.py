"""
Vendor Models - Pydantic models for Fewcents adapter config and wire payloads.

Adapter config keys arrive camelCase from the hosting document; denial
payloads arrive snake_case from the vendor API.
"""

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from paywall_access.exceptions import MalformedPurchaseConfigError

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class AdapterConfig(BaseModel):
    """Integration-time settings for the Fewcents adapter."""

    article_title_selector: str = Field(..., min_length=1)
    config_url: str | None = None
    article_id: str | None = None
    scroll_to_top_after_auth: bool | None = None
    locale: str = "en"
    locale_messages: dict[str, str] | None = None
    region: str | None = None
    sandbox: bool | None = None  # Declared by integrators; unused by the flow

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Price(BaseModel):
    amount: float | None = None
    currency: str | None = None
    payment_model: str | None = None


class Expiry(BaseModel):
    unit: str | None = None
    value: int | None = None


class PurchaseOption(BaseModel):
    """One purchasable unit offered on denial."""

    title: str | None = None
    description: str | None = None
    sales_model: str | None = None
    purchase_url: str | None = None
    price: Price | None = None
    expiry: Expiry | None = None


class PurchaseConfig(BaseModel):
    """
    Denial (HTTP 402) payload.

    Only the single generic purchase option is consumed. The vendor also
    documents categorized options (single purchases, time passes,
    subscriptions); those are ignored here.
    """

    identify_url: str | None = None
    purchase_options: PurchaseOption | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def price(self) -> Price | None:
        if self.purchase_options is None:
            return None
        return self.purchase_options.price

    @property
    def purchase_url(self) -> str | None:
        if self.purchase_options is None:
            return None
        return self.purchase_options.purchase_url


def _validate_partial(
    model: type[_ModelT],
    data: dict[str, Any],
    problems: list[str],
    nested: dict[str, type[BaseModel]] | None = None,
) -> _ModelT:
    """
    Validate `data`, dropping only the fields that fail.

    Fields named in `nested` are themselves validated partially, so a bad
    amount loses the amount and keeps the currency.
    """
    nested = nested or {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        bad_fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}

    problems.append(f"{model.__name__} has invalid {', '.join(sorted(bad_fields))}")
    kept = {key: value for key, value in data.items() if key not in bad_fields}
    for name in bad_fields & nested.keys():
        if isinstance(data.get(name), dict):
            kept[name] = _validate_partial(nested[name], data[name], problems)
    return model.model_validate(kept)


def parse_purchase_config(
    body: bytes | str,
) -> tuple[PurchaseConfig | None, MalformedPurchaseConfigError | None]:
    """
    Parse a 402 response body.

    Returns (None, error) only when the body is not a JSON object. Otherwise
    each field is read on its own: fields with the wrong shape are dropped
    and reported in the error, and the rest of the config is kept.
    """
    try:
        data: Any = json.loads(body)
    except ValueError as e:
        return None, MalformedPurchaseConfigError(f"invalid JSON ({e})")

    if not isinstance(data, dict):
        return None, MalformedPurchaseConfigError(f"expected an object, got {type(data).__name__}")

    problems: list[str] = []
    options_data = data.get("purchase_options")
    options: PurchaseOption | None = None
    if isinstance(options_data, dict):
        options = _validate_partial(
            PurchaseOption, options_data, problems, nested={"price": Price, "expiry": Expiry}
        )
    elif options_data is not None:
        problems.append(f"purchase_options is {type(options_data).__name__}, not an object")

    top_level = {key: value for key, value in data.items() if key != "purchase_options"}
    config = _validate_partial(PurchaseConfig, top_level, problems)
    config = config.model_copy(update={"purchase_options": options})

    if problems:
        return config, MalformedPurchaseConfigError("; ".join(problems))
    return config, None
