"""
Tests for SecretMaskingFilter and logging setup.
"""

import logging

from utils.logging_config import SecretMaskingFilter, setup_logging, SQL_LOGGERS


def make_record(msg, args=None):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestSecretMaskingFilter:

    def setup_method(self):
        self.filter = SecretMaskingFilter()

    def test_masks_bearer_token(self):
        record = make_record("Authorization: Bearer abc.def-123")

        assert self.filter.filter(record) is True
        assert "abc.def-123" not in record.msg
        assert "[REDACTED_BEARER_TOKEN]" in record.msg

    def test_masks_token_pair(self):
        record = make_record("auth_token=0123456789abcdefXYZ")
        self.filter.filter(record)

        assert "[REDACTED_TOKEN]" in record.msg

    def test_masks_phone_numbers(self):
        for phone in ("+79991234567", "8 (999) 123-45-67", "+7 999 123 45 67"):
            record = make_record(f"customer phone {phone} confirmed")
            self.filter.filter(record)

            assert "[REDACTED_PHONE]" in record.msg, phone

    def test_keeps_order_ids(self):
        record = make_record("Order 12345 SUBMITTED -> CONFIRMED")
        self.filter.filter(record)

        assert record.msg == "Order 12345 SUBMITTED -> CONFIRMED"

    def test_masks_address_value(self):
        record = make_record("address=ул. Ленина 5 кв 3")
        self.filter.filter(record)

        assert "Ленина" not in record.msg

    def test_masks_string_args(self):
        record = make_record("contact %s / %s", ("user@example.com", 42))
        self.filter.filter(record)

        assert record.args == ("[REDACTED_EMAIL]", 42)


class TestSetupLogging:

    def test_writes_log_file_and_silences_sql(self, tmp_path):
        root_logger = logging.getLogger()
        previous_handlers = root_logger.handlers[:]
        try:
            setup_logging(tmp_path)
            logging.getLogger("tests").warning("hello")
            for handler in root_logger.handlers:
                handler.flush()

            assert (tmp_path / "storefront.log").exists()
            assert "hello" in (tmp_path / "storefront.log").read_text(encoding="utf-8")
            for name in SQL_LOGGERS:
                assert logging.getLogger(name).propagate is False
        finally:
            for handler in root_logger.handlers[:]:
                root_logger.removeHandler(handler)
                handler.close()
            for handler in previous_handlers:
                root_logger.addHandler(handler)
