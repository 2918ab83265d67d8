from enum import Enum


class PaymentOutcomeKind(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


class RedirectState(str, Enum):
    AWAITING_REDIRECT = "AWAITING_REDIRECT"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


class NavigationDecision(str, Enum):
    LOAD = "LOAD"                       # ordinary web page, keep it in the browser/webview
    OPEN_EXTERNAL = "OPEN_EXTERNAL"     # banking-app deeplink with an installed handler
    BLOCK = "BLOCK"                     # unknown scheme or no handler
