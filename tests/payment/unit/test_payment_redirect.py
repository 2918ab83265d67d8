"""
Unit Tests for PaymentRedirectResolver and PaymentRedirectSession.
"""

import pytest

from enums.payment_outcome import NavigationDecision, PaymentOutcomeKind, RedirectState
from models.payment import PaymentOutcome
from services.payment_redirect import PaymentRedirectResolver, PaymentRedirectSession


class TestClassify:

    def test_success_with_query_order_id(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/payment_success?orderId=42")

        assert outcome == PaymentOutcome.success(42)

    def test_success_with_path_order_id(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/order/17/success")

        assert outcome == PaymentOutcome.success(17)

    def test_known_order_id_preferred(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/success?orderId=42", known_order_id=7)

        assert outcome.order_id == 7

    def test_success_without_order_id_is_error(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/payment_success")

        assert outcome.kind == PaymentOutcomeKind.ERROR
        assert outcome.message == "order id missing from return url"

    def test_success_wins_over_cancel(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/cancel/then/success?orderId=5")

        assert outcome.kind == PaymentOutcomeKind.SUCCESS

    def test_fail_wins_over_cancel(self):
        outcome = PaymentRedirectResolver.classify("https://shop.example/payment_fail?reason=cancelled")

        assert outcome == PaymentOutcome.failed()

    def test_cancel(self):
        assert PaymentRedirectResolver.classify("https://shop.example/payment_cancel") == PaymentOutcome.cancelled()

    def test_marker_match_is_case_insensitive(self):
        assert PaymentRedirectResolver.classify("https://shop.example/Payment_Success?orderId=3").order_id == 3

    @pytest.mark.parametrize("url", [
        "https://yoomoney.ru/checkout/payments/v2/contract?orderId=42",
        "https://shop.example/payment/",
        "",
    ])
    def test_unrecognized_url(self, url):
        assert PaymentRedirectResolver.classify(url) is None

    def test_deterministic(self):
        url = "https://shop.example/payment_success?orderId=42"

        assert PaymentRedirectResolver.classify(url) == PaymentRedirectResolver.classify(url)


class TestRouteNavigation:

    def test_web_urls_load(self):
        def probe(url):
            raise AssertionError("probe must not be called for web urls")

        assert PaymentRedirectResolver.route_navigation("https://yoomoney.ru/pay", probe) == NavigationDecision.LOAD
        assert PaymentRedirectResolver.route_navigation("http://localhost/x", probe) == NavigationDecision.LOAD

    @pytest.mark.parametrize("url", [
        "sberpay://pay?id=1",
        "sbolpay://invoicing/v2?orderId=1",
        "tinkoffbank://pay",
        "bank100000000111://sbp",
        "yoomoney://pay",
        "mirpay://pay",
    ])
    def test_banking_app_opened_when_installed(self, url):
        assert PaymentRedirectResolver.route_navigation(url, lambda _: True) == NavigationDecision.OPEN_EXTERNAL

    def test_banking_app_blocked_when_missing(self):
        assert PaymentRedirectResolver.route_navigation("sberpay://pay", lambda _: False) == NavigationDecision.BLOCK

    def test_probe_error_blocks(self):
        def probe(url):
            raise RuntimeError("no package manager")

        assert PaymentRedirectResolver.route_navigation("tinkoffbank://pay", probe) == NavigationDecision.BLOCK

    @pytest.mark.parametrize("url", ["intent://scan/#Intent;end", "javascript:alert(1)", "file:///etc/passwd"])
    def test_unknown_schemes_blocked(self, url):
        assert PaymentRedirectResolver.route_navigation(url, lambda _: True) == NavigationDecision.BLOCK


class TestPaymentRedirectSession:

    def test_starts_awaiting(self):
        session = PaymentRedirectSession(known_order_id=42)

        assert session.state == RedirectState.AWAITING_REDIRECT
        assert not session.is_finished

    def test_unrecognized_redirects_keep_awaiting(self):
        session = PaymentRedirectSession(known_order_id=42)

        assert session.on_redirect("https://yoomoney.ru/checkout") is None
        assert session.state == RedirectState.AWAITING_REDIRECT

    def test_outcome_delivered_once(self):
        session = PaymentRedirectSession(known_order_id=42)

        first = session.on_redirect("https://shop.example/payment_success")
        second = session.on_redirect("https://shop.example/payment_cancel")

        assert first == PaymentOutcome.success(42)
        assert second is None
        assert session.state == RedirectState.SUCCESS
        assert session.outcome == first

    @pytest.mark.parametrize("url,state", [
        ("https://shop.example/payment_fail", RedirectState.FAILED),
        ("https://shop.example/payment_cancel", RedirectState.CANCELLED),
    ])
    def test_terminal_states(self, url, state):
        session = PaymentRedirectSession(known_order_id=1)

        session.on_redirect(url)

        assert session.state == state

    def test_success_without_any_order_id_is_error(self):
        session = PaymentRedirectSession()

        outcome = session.on_redirect("https://shop.example/success")

        assert outcome.kind == PaymentOutcomeKind.ERROR
        assert session.state == RedirectState.ERROR
