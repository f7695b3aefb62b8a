"""Tests for encryption helpers."""

from lifepolicy_app.core.crypto import CryptoService, lookup_hash, mask_customer_id


def test_encrypt_decrypt_round_trip() -> None:
    crypto = CryptoService.from_base64_key(CryptoService.generate_base64_key())

    cipher = crypto.encrypt_text("CUST-000123")

    assert crypto.decrypt_text(cipher) == "CUST-000123"
    assert cipher != crypto.encrypt_text("CUST-000123")


def test_lookup_hash_is_deterministic() -> None:
    assert lookup_hash("CUST-1") == lookup_hash("CUST-1")
    assert lookup_hash("CUST-1") != lookup_hash("CUST-2")


def test_mask_customer_id() -> None:
    assert mask_customer_id("CUST-000123") == "*******0123"
    assert mask_customer_id("AB1") == "***"
