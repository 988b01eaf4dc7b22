"""
Tests for outbound webhook signing.
"""

import time

from apps.destinations.signing import delivery_headers, generate_signature

from .helpers import verify_signature


class TestSignatures:
    def test_signature_format(self) -> None:
        signature, timestamp = generate_signature('{"a":1}', "secret", timestamp=1700000000)

        assert timestamp == 1700000000
        assert signature.startswith("v1=")
        assert len(signature) == len("v1=") + 64

    def test_deterministic_for_same_inputs(self) -> None:
        first, _ = generate_signature("body", "secret", timestamp=1)
        second, _ = generate_signature("body", "secret", timestamp=1)
        other, _ = generate_signature("body", "other", timestamp=1)

        assert first == second
        assert first != other

    def test_verify_round_trip(self) -> None:
        signature, timestamp = generate_signature("body", "secret")

        assert verify_signature("body", "secret", signature, timestamp)
        assert not verify_signature("tampered", "secret", signature, timestamp)

    def test_verify_rejects_stale_timestamp(self) -> None:
        stale = int(time.time()) - 3600
        signature, _ = generate_signature("body", "secret", timestamp=stale)

        assert not verify_signature("body", "secret", signature, stale)


class TestDeliveryHeaders:
    def test_unsigned(self) -> None:
        headers = delivery_headers("{}", "evt_1")

        assert headers["X-Webhook-ID"] == "evt_1"
        assert "X-Webhook-Signature" not in headers

    def test_signed(self) -> None:
        headers = delivery_headers("{}", "evt_1", secret="secret")

        assert headers["X-Webhook-Signature"].startswith("v1=")
        assert headers["X-Webhook-Timestamp"].isdigit()
