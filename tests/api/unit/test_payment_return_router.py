"""
Unit Tests for the payment return receiver.

The pipeline is replaced through FastAPI's dependency overrides.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from enums.order_status import OrderStatus
from enums.payment_outcome import PaymentOutcomeKind
from exceptions.order import OrderNotFoundException, StateConflictException
from models.order import OrderDTO
from models.payment import PaymentOutcome
from processing.payment_return import payment_return_router, get_order_pipeline


@pytest.fixture
def mock_pipeline():
    pipeline = MagicMock()
    pipeline.apply_payment_outcome = AsyncMock(return_value=OrderDTO(id=1, remote_id=42, status=OrderStatus.CONFIRMED))
    return pipeline


@pytest.fixture
def client(mock_pipeline):
    app = FastAPI()
    app.include_router(payment_return_router)
    app.dependency_overrides[get_order_pipeline] = lambda: mock_pipeline
    with TestClient(app) as test_client:
        yield test_client


class TestPaymentReturn:

    def test_success_confirms_order(self, client, mock_pipeline):
        response = client.get("/payment/payment_success?orderId=42")

        assert response.status_code == 200
        assert response.json() == {"status": "SUCCESS", "order_id": 42, "order_status": "CONFIRMED"}
        mock_pipeline.apply_payment_outcome.assert_awaited_once_with(PaymentOutcome.success(42), 42)

    def test_fail_passes_order_id_from_url(self, client, mock_pipeline):
        mock_pipeline.apply_payment_outcome.return_value = OrderDTO(id=1, remote_id=42, status=OrderStatus.FAILED)

        response = client.get("/payment/payment_fail?orderId=42")

        assert response.json()["order_status"] == "FAILED"
        outcome, order_id = mock_pipeline.apply_payment_outcome.await_args.args
        assert outcome.kind == PaymentOutcomeKind.FAILED
        assert order_id == 42

    def test_unrecognized_url_keeps_waiting(self, client, mock_pipeline):
        response = client.get("/payment/processing?orderId=42")

        assert response.json() == {"status": "AWAITING_REDIRECT"}
        mock_pipeline.apply_payment_outcome.assert_not_awaited()

    def test_success_without_order_id(self, client, mock_pipeline):
        response = client.get("/payment/payment_success")

        assert response.json() == {"status": "ERROR", "message": "order id missing from return url"}
        mock_pipeline.apply_payment_outcome.assert_not_awaited()

    def test_unknown_order_is_404(self, client, mock_pipeline):
        mock_pipeline.apply_payment_outcome.side_effect = OrderNotFoundException(42)

        response = client.get("/payment/payment_success?orderId=42")

        assert response.status_code == 404
        assert response.json()["detail"] == "error_order_not_found"

    def test_final_order_is_409(self, client, mock_pipeline):
        mock_pipeline.apply_payment_outcome.side_effect = StateConflictException(1, "CANCELLED", "CONFIRMED")

        response = client.get("/payment/payment_success?orderId=42")

        assert response.status_code == 409
        assert response.json()["detail"] == "error_order_invalid_state"
