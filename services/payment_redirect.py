"""
Payment Redirect Resolver

The payment provider reports the result of an external payment only by
redirecting the browser/webview to a return URL. This module turns those URLs
into a PaymentOutcome and decides what to do with every navigation the
payment page attempts.
"""

import logging
import re
from typing import Callable
from urllib.parse import urlsplit

from enums.payment_outcome import NavigationDecision, PaymentOutcomeKind, RedirectState
from models.payment import PaymentOutcome

logger = logging.getLogger(__name__)


class PaymentRedirectResolver:
    # Checked in this order, the first marker found in the URL decides
    SUCCESS_MARKERS = ("payment_success", "success")
    FAIL_MARKERS = ("payment_fail", "fail")
    CANCEL_MARKERS = ("payment_cancel", "cancel")

    ORDER_ID_QUERY = re.compile(r"orderId=(\d+)")
    ORDER_ID_PATH = re.compile(r"/order/(\d+)")

    # Banking-app deeplink schemes, matched as scheme prefixes
    EXTERNAL_SCHEMES = ("sberpay", "sbolpay", "tinkoffbank", "mirpay", "bank", "yoomoney")
    WEB_SCHEMES = ("http", "https")

    @classmethod
    def classify(cls, return_url: str, known_order_id: int | None = None) -> PaymentOutcome | None:
        """
        Classify a return URL.

        Returns None when the URL carries no result marker, so the caller
        keeps waiting for the next redirect.

        Example:
            >>> PaymentRedirectResolver.classify("https://shop.example/payment_success?orderId=42")
            PaymentOutcome(kind=<PaymentOutcomeKind.SUCCESS: 'SUCCESS'>, order_id=42, message=None)
        """
        url = return_url.lower()

        if any(marker in url for marker in cls.SUCCESS_MARKERS):
            order_id = known_order_id if known_order_id else cls.extract_order_id(return_url)
            if order_id is None:
                logger.warning("Payment success redirect without an order id")
                return PaymentOutcome.error("order id missing from return url")
            return PaymentOutcome.success(order_id)
        if any(marker in url for marker in cls.FAIL_MARKERS):
            return PaymentOutcome.failed()
        if any(marker in url for marker in cls.CANCEL_MARKERS):
            return PaymentOutcome.cancelled()
        return None

    @classmethod
    def extract_order_id(cls, url: str) -> int | None:
        for pattern in (cls.ORDER_ID_QUERY, cls.ORDER_ID_PATH):
            match = pattern.search(url)
            if match is not None:
                order_id = int(match.group(1))
                if order_id > 0:
                    return order_id
        return None

    @classmethod
    def route_navigation(cls, url: str, can_open_external: Callable[[str], bool]) -> NavigationDecision:
        """
        Decide how to handle a navigation attempted by the payment page.

        Web URLs are loaded (and should be fed to classify()). Banking-app
        deeplinks are opened externally when can_open_external says an app
        handles them. Anything else is blocked.
        """
        scheme = urlsplit(url).scheme.lower()

        if scheme in cls.WEB_SCHEMES:
            return NavigationDecision.LOAD

        if scheme and any(scheme.startswith(external) for external in cls.EXTERNAL_SCHEMES):
            try:
                can_open = can_open_external(url)
            except Exception as e:
                logger.warning(f"Handler lookup for '{scheme}' failed: {e}")
                return NavigationDecision.BLOCK
            if can_open:
                return NavigationDecision.OPEN_EXTERNAL
            logger.warning(f"No application installed for '{scheme}' deeplink, blocked")
            return NavigationDecision.BLOCK

        logger.warning(f"Unknown URL scheme '{scheme}', blocked")
        return NavigationDecision.BLOCK


class PaymentRedirectSession:
    """
    One payment flow: AWAITING_REDIRECT until the first recognized return URL.

    The outcome is delivered exactly once; redirects after that are ignored.
    """

    _KIND_TO_STATE = {
        PaymentOutcomeKind.SUCCESS: RedirectState.SUCCESS,
        PaymentOutcomeKind.FAILED: RedirectState.FAILED,
        PaymentOutcomeKind.CANCELLED: RedirectState.CANCELLED,
        PaymentOutcomeKind.ERROR: RedirectState.ERROR,
    }

    def __init__(self, known_order_id: int | None = None):
        self.known_order_id = known_order_id
        self.state = RedirectState.AWAITING_REDIRECT
        self.outcome: PaymentOutcome | None = None

    @property
    def is_finished(self) -> bool:
        return self.state != RedirectState.AWAITING_REDIRECT

    def on_redirect(self, url: str) -> PaymentOutcome | None:
        if self.is_finished:
            return None
        outcome = PaymentRedirectResolver.classify(url, self.known_order_id)
        if outcome is None:
            return None
        self.outcome = outcome
        self.state = self._KIND_TO_STATE[outcome.kind]
        logger.info(f"Payment flow for order {self.known_order_id} finished: {self.state.value}")
        return outcome
