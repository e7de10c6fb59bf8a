"""
Unit tests for token issuance and the token shape gate.
"""

import re
from datetime import timedelta

import pytest

from src.domain.tokens import TokenIssuer, generate_token, is_well_formed_token
from tests.helpers import START, FakeClock

DASHED = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class TestGenerateToken:
    def test_token_is_dashed_lowercase_hex(self) -> None:
        assert DASHED.match(generate_token())

    def test_token_carries_128_bits(self) -> None:
        """All 32 hex digits are random (no fixed UUID version nibble)."""
        assert len(generate_token().replace("-", "")) == 32

    def test_tokens_are_unique(self) -> None:
        tokens = {generate_token() for _ in range(1000)}
        assert len(tokens) == 1000

    def test_generated_tokens_pass_shape_gate(self) -> None:
        assert is_well_formed_token(generate_token())


class TestTokenIssuer:
    def test_expiry_is_now_plus_lifetime(self) -> None:
        clock = FakeClock()
        issuer = TokenIssuer(lifetime=timedelta(hours=2), clock=clock)

        issued = issuer.issue()

        assert issued.expires == START + timedelta(hours=2)

    def test_each_issue_gets_new_token(self) -> None:
        issuer = TokenIssuer(lifetime=timedelta(minutes=5))
        assert issuer.issue().token != issuer.issue().token

    @pytest.mark.parametrize("lifetime", [timedelta(0), timedelta(seconds=-1)])
    def test_non_positive_lifetime_rejected(self, lifetime: timedelta) -> None:
        with pytest.raises(ValueError):
            TokenIssuer(lifetime=lifetime)


class TestIsWellFormedToken:
    @pytest.mark.parametrize(
        "token",
        [
            "0123456789abcdef012345",
            "0123456789ABCDEF012345",
            "01234567-89ab-cdef-0123-456789abcdef",
            "01234567-89AB-CDEF-0123-456789ABCDEF",
        ],
    )
    def test_accepted_shapes(self, token: str) -> None:
        assert is_well_formed_token(token)

    @pytest.mark.parametrize(
        "token",
        [
            None,
            "",
            "resend-verification",
            "0123456789abcdef01234",  # 21 chars
            "0123456789abcdef0123456",  # 23 chars
            "0123456789abcdef01234g",
            "01234567-89ab-cdef-0123-456789abcde",
            "x01234567-89ab-cdef-0123-456789abcdef",
            "01234567-89ab-cdef-0123-456789abcdef/extra",
        ],
    )
    def test_rejected_shapes(self, token) -> None:
        assert not is_well_formed_token(token)
