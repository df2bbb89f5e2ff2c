import pytest

from template_forge.core.errors import ValidationError
from template_forge.models.contract_model import U64_MAX
from template_forge.utils.validators import (
    ValidationConfig,
    ensure_amount,
    ensure_bps,
    ensure_int,
    ensure_rating,
    ensure_u64,
    to_buffer,
    validate_account,
    validate_token_identifier,
    validate_token_name,
)


class TestIntegers:
    """Test suite for integer coercion."""

    def test_ensure_int_bounds(self) -> None:
        assert ensure_int(5, "value", 1, 5) == 5
        with pytest.raises(ValidationError, match="between 1 and 5"):
            ensure_int(6, "value", 1, 5)

    @pytest.mark.parametrize("value", [True, False, 1.0, "1", None])
    def test_rejects_non_integers(self, value) -> None:
        with pytest.raises(ValidationError, match="must be an integer") as exc_info:
            ensure_int(value, "value")
        assert exc_info.value.field_name == "value"

    def test_u64_range(self) -> None:
        assert ensure_u64(U64_MAX, "id") == U64_MAX
        with pytest.raises(ValidationError):
            ensure_u64(U64_MAX + 1, "id")
        with pytest.raises(ValidationError):
            ensure_u64(-1, "id")

    def test_amount_is_unbounded(self) -> None:
        assert ensure_amount(10**40) == 10**40
        with pytest.raises(ValidationError, match="unbounded"):
            ensure_amount(-1)

    @pytest.mark.parametrize("rating", [ValidationConfig.MIN_RATING, 3, ValidationConfig.MAX_RATING])
    def test_valid_ratings(self, rating: int) -> None:
        assert ensure_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6])
    def test_invalid_ratings(self, rating: int) -> None:
        with pytest.raises(ValidationError):
            ensure_rating(rating)

    def test_bps(self) -> None:
        assert ensure_bps(10_000, "fee") == 10_000
        with pytest.raises(ValidationError):
            ensure_bps(10_001, "fee")


class TestBuffers:
    """Test suite for byte buffer coercion."""

    def test_text_is_utf8_encoded(self) -> None:
        assert to_buffer("héllo", "text") == "héllo".encode("utf-8")

    def test_bytes_like(self) -> None:
        assert to_buffer(bytearray(b"ab"), "data") == b"ab"
        assert to_buffer(memoryview(b"cd"), "data") == b"cd"

    def test_empty_allowed_by_default(self) -> None:
        assert to_buffer("", "hash") == b""
        with pytest.raises(ValidationError, match="cannot be empty"):
            to_buffer("", "name", allow_empty=False)

    def test_rejects_other_types(self) -> None:
        with pytest.raises(ValidationError, match="bytes or text"):
            to_buffer(123, "data")

    def test_token_name_length(self) -> None:
        assert validate_token_name("x" * ValidationConfig.MAX_TOKEN_NAME_LENGTH) == b"x" * 50
        with pytest.raises(ValidationError, match="cannot exceed"):
            validate_token_name("x" * 51)


class TestIdentifiers:
    """Test suite for account and token identifiers."""

    def test_validate_account(self) -> None:
        assert validate_account("erd1alice") == "erd1alice"
        for account in ("", "   ", None, 7):
            with pytest.raises(ValidationError):
                validate_account(account)

    @pytest.mark.parametrize("token_identifier", ["TMPL-a1b2c3", "ABC-000000", "FORGE2024-ffffff"])
    def test_valid_token_identifiers(self, token_identifier: str) -> None:
        assert validate_token_identifier(token_identifier) == token_identifier

    @pytest.mark.parametrize(
        "token_identifier",
        ["AB-a1b2c3", "TMPL-A1B2C3", "TMPL-a1b2c", "tmpl-a1b2c3", "TOOLONGTICKER-a1b2c3", "TMPL_a1b2c3"],
    )
    def test_invalid_token_identifiers(self, token_identifier: str) -> None:
        with pytest.raises(ValidationError, match="TICKER-abcdef"):
            validate_token_identifier(token_identifier)
