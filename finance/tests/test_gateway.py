from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests
from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from core.exceptions import GatewayError, InvalidAmount
from finance import gateway


def rate_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


@override_settings(SMIS_DEFAULT_EXCHANGE_RATE=Decimal("157.19"), SMIS_CURRENCY="JMD")
class ExchangeRateTests(SimpleTestCase):
    def setUp(self):
        cache.clear()

    @patch("finance.gateway.requests.get")
    def test_fetch_and_cache(self, get_mock):
        get_mock.return_value = rate_response({"rates": {"JMD": 155.5}})
        self.assertEqual(gateway.get_exchange_rate(), Decimal("155.5"))
        self.assertEqual(gateway.get_exchange_rate(), Decimal("155.5"))
        self.assertEqual(get_mock.call_count, 1)

    @patch("finance.gateway.requests.get")
    def test_network_failure_falls_back_to_default(self, get_mock):
        get_mock.side_effect = requests.ConnectionError("offline")
        self.assertEqual(gateway.get_exchange_rate(), Decimal("157.19"))

    @patch("finance.gateway.requests.get")
    def test_missing_rate_raises(self, get_mock):
        get_mock.return_value = rate_response({"rates": {}})
        with self.assertRaises(GatewayError):
            gateway.fetch_exchange_rate()

    @patch("finance.gateway.requests.get")
    def test_bad_json_raises(self, get_mock):
        resp = rate_response(None)
        resp.json.side_effect = ValueError("not json")
        get_mock.return_value = resp
        with self.assertRaises(GatewayError):
            gateway.fetch_exchange_rate()


    @patch("finance.gateway.requests.get")
    def test_malformed_payloads_raise(self, get_mock):
        payloads = (
            [1, 2],
            "157.19",
            {"rates": ["JMD", 155.5]},
            {"rates": {"JMD": "abc"}},
            {"rates": {"JMD": True}},
            {"rates": {"JMD": "NaN"}},
            {"rates": {"JMD": -1}},
        )
        for payload in payloads:
            get_mock.return_value = rate_response(payload)
            with self.assertRaises(GatewayError, msg=repr(payload)):
                gateway.fetch_exchange_rate()

    @patch("finance.gateway.requests.get")
    def test_malformed_payload_falls_back_to_default(self, get_mock):
        get_mock.return_value = rate_response([1, 2])
        self.assertEqual(gateway.get_exchange_rate(), Decimal("157.19"))

    @patch("finance.gateway.requests.get")
    def test_string_rate_is_accepted(self, get_mock):
        get_mock.return_value = rate_response({"rates": {"JMD": "156.25"}})
        self.assertEqual(gateway.fetch_exchange_rate(), Decimal("156.25"))


@override_settings(SMIS_CURRENCY="JMD")
class CheckoutQuoteTests(SimpleTestCase):
    def test_conversion_rounds_half_up(self):
        self.assertEqual(gateway.usd_to_cents(Decimal("1.005")), 101)
        self.assertEqual(gateway.usd_to_cents(Decimal("1.004")), 100)

    def test_quote(self):
        quote = gateway.checkout_quote("1571.90", Decimal("5000"), rate=Decimal("157.19"))
        self.assertEqual(quote["amount"], Decimal("1571.90"))
        self.assertEqual(quote["usd"], Decimal("10.00"))
        self.assertEqual(quote["cents"], 1000)
        self.assertEqual(quote["currency"], "JMD")

    def test_below_processor_minimum(self):
        # 50 JMD is about 32 US cents
        with self.assertRaises(InvalidAmount):
            gateway.checkout_quote("50", Decimal("5000"), rate=Decimal("157.19"))

    def test_amount_over_balance(self):
        with self.assertRaises(InvalidAmount):
            gateway.checkout_quote("6000", Decimal("5000"), rate=Decimal("157.19"))
