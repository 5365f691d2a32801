"""
Card-gateway boundary.

The only place JMD amounts are turned into the US-dollar cents the card
processor charges in. The exchange rate comes from a public rate API and
is cached; if the API cannot be reached the configured default rate is
used instead.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

import requests
from django.conf import settings
from django.core.cache import cache

from core.exceptions import GatewayError, InvalidAmount
from students.records import safe_decimal

from .reconciliation import validate_checkout_amount

logger = logging.getLogger(__name__)

RATE_CACHE_KEY = "finance:jmd_per_usd"

# Processors refuse charges below 50 US cents.
MINIMUM_CHARGE_CENTS = 50


def fetch_exchange_rate():
    """JMD per USD from ``SMIS_EXCHANGE_RATE_URL``."""
    try:
        resp = requests.get(
            settings.SMIS_EXCHANGE_RATE_URL,
            timeout=settings.SMIS_EXCHANGE_RATE_TIMEOUT,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise GatewayError(f"Exchange rate lookup failed: {e}") from e

    rates = payload.get("rates") if isinstance(payload, dict) else None
    if not isinstance(rates, dict):
        raise GatewayError("Invalid exchange rate data")
    rate = safe_decimal(rates.get(settings.SMIS_CURRENCY), default=None)
    if rate is None or rate <= 0:
        raise GatewayError("Invalid exchange rate data")
    return rate


def get_exchange_rate():
    rate = cache.get(RATE_CACHE_KEY)
    if rate is not None:
        return rate
    try:
        rate = fetch_exchange_rate()
    except GatewayError as e:
        logger.warning("%s; using default rate %s", e, settings.SMIS_DEFAULT_EXCHANGE_RATE)
        return settings.SMIS_DEFAULT_EXCHANGE_RATE
    cache.set(RATE_CACHE_KEY, rate, settings.SMIS_EXCHANGE_RATE_TTL)
    return rate


def jmd_to_usd(amount, rate):
    return Decimal(amount) / Decimal(rate)


def usd_to_cents(usd):
    return int((Decimal(usd) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def checkout_quote(amount, balance, rate=None):
    """
    Validate a card payment of ``amount`` JMD against ``balance`` and
    return what the processor would be asked to charge.
    """
    amount = validate_checkout_amount(amount, balance)
    rate = rate or get_exchange_rate()
    usd = jmd_to_usd(amount, rate)
    cents = usd_to_cents(usd)
    if cents < MINIMUM_CHARGE_CENTS:
        minimum = (Decimal(MINIMUM_CHARGE_CENTS) / 100 * Decimal(rate)).quantize(Decimal("0.01"))
        raise InvalidAmount(f"Amount too small. Minimum is ~{minimum} {settings.SMIS_CURRENCY}.")
    return {
        "amount": amount,
        "currency": settings.SMIS_CURRENCY,
        "rate": rate,
        "usd": usd.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        "cents": cents,
    }
