"""
Hypothesis Property-Based Tests for adapter models.

Uses Hypothesis to generate random valid/invalid inputs and verify:
- Price formatting never fails, whatever the vendor sends
- Denial payload parsing reports errors instead of raising
- Adapter config survives a camelCase round-trip
- Locale overrides only replace the keys they name
"""

import json

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from paywall_access.exceptions import MalformedPurchaseConfigError
from paywall_access.models.domain import (
    DEFAULT_ALREADY_PURCHASED_LINK,
    DEFAULT_BUTTON,
    LocaleMessages,
    ReaderContext,
)
from paywall_access.models.vendor import (
    AdapterConfig,
    Price,
    PurchaseConfig,
    parse_purchase_config,
)
from paywall_access.services.fewcents_vendor import PRICE_PLACEHOLDER, format_price

# ============================================================================
# Hypothesis Strategies - Reusable data generators
# ============================================================================

locales = st.sampled_from(["en", "en-US", "en_GB", "fr", "de-DE", "hi-IN", "ja", "zz-ZZ", "xx"])

currency_codes = st.one_of(
    st.sampled_from(["USD", "EUR", "GBP", "JPY", "INR", "SGD"]),
    st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=3, max_size=3),
)

amounts = st.floats(min_value=0, max_value=1_000_000, allow_nan=False, allow_infinity=False)

json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=10), children, max_size=4),
    max_leaves=20,
)

optional_text = st.none() | st.text(min_size=1, max_size=40)


# ============================================================================
# format_price
# ============================================================================


class TestFormatPriceProperties:
    @given(amount=amounts, currency=currency_codes, locale=locales)
    def test_never_raises_and_never_blank(self, amount, currency, locale):
        result = format_price(Price(amount=amount, currency=currency), locale)
        assert isinstance(result, str)
        assert result

    @given(
        amount=st.sampled_from([float("nan"), float("inf"), float("-inf")]),
        currency=currency_codes,
        locale=locales,
    )
    def test_non_finite_amount_gives_placeholder(self, amount, currency, locale):
        assert format_price(Price(amount=amount, currency=currency), locale) == PRICE_PLACEHOLDER

    @given(currency=st.none() | currency_codes, locale=locales)
    def test_missing_amount_gives_placeholder(self, currency, locale):
        assert format_price(Price(amount=None, currency=currency), locale) == PRICE_PLACEHOLDER

    @given(amount=st.none() | amounts, locale=locales)
    def test_missing_currency_gives_placeholder(self, amount, locale):
        assert format_price(Price(amount=amount, currency=None), locale) == PRICE_PLACEHOLDER


# ============================================================================
# parse_purchase_config
# ============================================================================


class TestParsePurchaseConfigProperties:
    @given(body=st.binary(max_size=200))
    def test_arbitrary_bytes_never_raise(self, body):
        config, error = parse_purchase_config(body)
        if config is None:
            assert isinstance(error, MalformedPurchaseConfigError)
        else:
            assert isinstance(config, PurchaseConfig)

    @given(value=json_values)
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_arbitrary_json_never_raises(self, value):
        config, error = parse_purchase_config(json.dumps(value))
        if config is not None:
            assert isinstance(config, PurchaseConfig)
        else:
            assert isinstance(error, MalformedPurchaseConfigError)

    @given(value=st.dictionaries(st.text(max_size=10), json_values, max_size=4))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_any_json_object_keeps_a_config(self, value):
        """Only a non-object body loses the whole config."""
        config, _ = parse_purchase_config(json.dumps(value))
        assert isinstance(config, PurchaseConfig)

    @given(
        identify_url=optional_text,
        purchase_url=optional_text,
        amount=st.none() | amounts,
        currency=st.none() | currency_codes,
    )
    def test_well_formed_payload_parses(self, identify_url, purchase_url, amount, currency):
        body = json.dumps(
            {
                "identify_url": identify_url,
                "purchase_options": {
                    "purchase_url": purchase_url,
                    "price": {"amount": amount, "currency": currency},
                },
                "unknown_field": [1, 2, 3],
            }
        )
        config, error = parse_purchase_config(body)

        assert error is None
        assert config.identify_url == identify_url
        assert config.purchase_url == purchase_url
        assert config.price.currency == currency


# ============================================================================
# AdapterConfig
# ============================================================================


class TestAdapterConfigProperties:
    @given(
        selector=st.text(min_size=1, max_size=40),
        config_url=optional_text,
        article_id=optional_text,
        scroll=st.none() | st.booleans(),
        locale=locales,
        messages=st.none() | st.dictionaries(st.text(max_size=15), st.text(max_size=15)),
    )
    def test_camel_case_round_trip(self, selector, config_url, article_id, scroll, locale, messages):
        config = AdapterConfig(
            article_title_selector=selector,
            config_url=config_url,
            article_id=article_id,
            scroll_to_top_after_auth=scroll,
            locale=locale,
            locale_messages=messages,
        )
        dumped = config.model_dump(by_alias=True)

        assert "articleTitleSelector" in dumped
        assert AdapterConfig.model_validate(dumped) == config

    def test_empty_selector_rejected(self):
        with pytest.raises(ValidationError):
            AdapterConfig(article_title_selector="")


# ============================================================================
# Domain models
# ============================================================================


class TestLocaleMessagesProperties:
    @given(button=st.text(max_size=30), link=st.text(max_size=30))
    def test_overrides_replace_named_keys(self, button, link):
        messages = LocaleMessages.from_overrides(
            {"defaultButton": button, "alreadyPurchasedLink": link}
        )
        assert messages.default_button == button
        assert messages.already_purchased_link == link

    @given(extra=st.dictionaries(st.text(max_size=10), st.text(max_size=10)))
    def test_unrelated_keys_keep_defaults(self, extra):
        extra.pop("defaultButton", None)
        extra.pop("alreadyPurchasedLink", None)
        messages = LocaleMessages.from_overrides(extra)
        assert messages.default_button == DEFAULT_BUTTON
        assert messages.already_purchased_link == DEFAULT_ALREADY_PURCHASED_LINK


class TestReaderContextProperties:
    @given(
        canonical_url=st.text(min_size=1, max_size=50),
        reader_id=st.text(min_size=1, max_size=50),
    )
    def test_non_empty_values_accepted(self, canonical_url, reader_id):
        reader = ReaderContext(
            canonical_url=canonical_url, reader_id=reader_id, return_url="https://r.test"
        )
        assert reader.reader_id == reader_id

    @given(reader_id=st.text(min_size=1, max_size=50))
    def test_empty_canonical_url_rejected(self, reader_id):
        with pytest.raises(ValueError):
            ReaderContext(canonical_url="", reader_id=reader_id, return_url="https://r.test")
