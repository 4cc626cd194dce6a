"""
Unit tests for timestamp-window rules.
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from okta_jwt_verifier.rules.coercion import parse_timestamp
from okta_jwt_verifier.rules.constructors import expiration_rule, issued_at_rule, timestamp_rule
from okta_jwt_verifier.rules.models import NumericMode, TimestampDirection
from okta_jwt_verifier.shared.errors import ClaimTypeMismatchError, ClaimValueMismatchError


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
T = int(NOW.timestamp())


def fixed_clock():
    return NOW


class TestExpirationRule:
    """Test cases for expiration semantics."""

    @pytest.fixture
    def rule(self):
        """Expiration rule with 60 seconds of leeway."""
        return expiration_rule(leeway=60, now=fixed_clock)

    def test_key(self, rule):
        """Test the rule is keyed on exp."""
        assert rule.key == "exp"

    def test_within_leeway(self, rule):
        """Test a token expired 30 seconds ago passes with 60 seconds leeway."""
        assert rule.predicate(float(T - 30)) is None

    def test_beyond_leeway(self, rule):
        """Test a token expired 90 seconds ago fails."""
        with pytest.raises(ClaimValueMismatchError) as exc_info:
            rule.predicate(float(T - 90))

        assert str(exc_info.value) == "token is expired"

    def test_boundary_passes(self, rule):
        """Test a difference exactly equal to the leeway passes."""
        assert rule.predicate(float(T - 60)) is None

    def test_no_leeway(self):
        """Test that zero leeway has no tolerance."""
        rule = expiration_rule(now=fixed_clock)

        assert rule.predicate(float(T + 30)) is None
        assert rule.predicate(float(T)) is None
        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(float(T - 1))

    def test_invalid_timestamp(self, rule):
        """Test a string timestamp names both types."""
        with pytest.raises(ClaimTypeMismatchError) as exc_info:
            rule.predicate("foobar")

        assert str(exc_info.value) == "expected a float but got a str"


class TestIssuedAtRule:
    """Test cases for issued-at semantics."""

    @pytest.fixture
    def rule(self):
        """Issued-at rule with 60 seconds of leeway."""
        return issued_at_rule(leeway=60, now=fixed_clock)

    def test_key(self, rule):
        """Test the rule is keyed on iat."""
        assert rule.key == "iat"

    def test_within_leeway(self, rule):
        """Test a token issued 30 seconds ahead passes."""
        assert rule.predicate(float(T + 30)) is None

    def test_beyond_leeway(self, rule):
        """Test a token issued 90 seconds ahead fails."""
        with pytest.raises(ClaimValueMismatchError) as exc_info:
            rule.predicate(float(T + 90))

        assert str(exc_info.value) == "token was issued in the future"

    def test_boundary_passes(self, rule):
        """Test a difference exactly equal to the leeway passes."""
        assert rule.predicate(float(T + 60)) is None

    def test_no_leeway_fails(self):
        """Test a token issued 30 seconds ahead fails without leeway."""
        rule = issued_at_rule(now=fixed_clock)

        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(float(T + 30))
        assert rule.predicate(float(T)) is None
        assert rule.predicate(float(T - 3600)) is None


class TestTimestampRule:
    """Test cases for timestamp_rule configuration."""

    def test_negative_leeway_rejected(self):
        """Test that a negative leeway is refused at construction."""
        with pytest.raises(ValueError):
            timestamp_rule("exp", leeway=-1)

    def test_custom_claim(self):
        """Test a window rule on another claim."""
        rule = timestamp_rule(
            "auth_time", leeway=0, direction=TimestampDirection.ISSUED_AT, now=fixed_clock
        )

        assert rule.key == "auth_time"
        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(float(T + 1))

    def test_naive_clock_is_utc(self):
        """Test that a naive now is read as UTC."""
        rule = expiration_rule(now=lambda: NOW.replace(tzinfo=None))

        assert rule.predicate(float(T)) is None
        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(float(T - 1))

    def test_clock_read_on_each_evaluation(self):
        """Test the injected clock is consulted per evaluation."""
        moments = [NOW, NOW + timedelta(seconds=120)]
        rule = expiration_rule(leeway=60, now=lambda: moments.pop(0))

        assert rule.predicate(float(T)) is None
        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(float(T))

    def test_sub_second_precision_is_dropped(self):
        """Test a fractional float timestamp is truncated to whole seconds."""
        rule = expiration_rule(now=lambda: NOW + timedelta(milliseconds=500))

        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(T + 0.9)


class TestFixedPrecisionMode:
    """Test cases for fixed-precision timestamp decoding."""

    @pytest.fixture
    def rule(self):
        """Expiration rule decoding fixed-precision numbers."""
        return expiration_rule(leeway=60, now=fixed_clock, numeric_mode=NumericMode.FIXED_PRECISION)

    def test_integer_timestamp(self, rule):
        """Test an int timestamp is accepted."""
        assert rule.predicate(T - 30) is None
        with pytest.raises(ClaimValueMismatchError):
            rule.predicate(T - 90)

    def test_integral_decimal(self, rule):
        """Test an integral Decimal timestamp is accepted."""
        assert rule.predicate(Decimal(T - 30)) is None

    def test_fractional_decimal(self, rule):
        """Test a fractional Decimal is not an integer timestamp."""
        with pytest.raises(ClaimTypeMismatchError) as exc_info:
            rule.predicate(Decimal("1.5"))

        assert str(exc_info.value) == "expected an integer timestamp but got '1.5'"

    def test_float_rejected(self, rule):
        """Test a float does not match the fixed-precision representation."""
        with pytest.raises(ClaimTypeMismatchError) as exc_info:
            rule.predicate(float(T))

        assert str(exc_info.value) == "expected an int or Decimal but got a float"

    def test_bool_rejected(self, rule):
        """Test a bool is not taken for an int."""
        with pytest.raises(ClaimTypeMismatchError):
            rule.predicate(True)

    def test_int_rejected_in_float_mode(self):
        """Test an int does not match the float representation."""
        rule = expiration_rule(now=fixed_clock, numeric_mode=NumericMode.FLOAT)

        with pytest.raises(ClaimTypeMismatchError) as exc_info:
            rule.predicate(T)

        assert str(exc_info.value) == "expected a float but got an int"


class TestParseTimestamp:
    """Test cases for parse_timestamp."""

    def test_returns_utc_datetime(self):
        """Test conversion to an aware UTC datetime."""
        assert parse_timestamp(float(T), NumericMode.FLOAT) == NOW
        assert parse_timestamp(T, NumericMode.FIXED_PRECISION) == NOW

    def test_out_of_range(self):
        """Test a timestamp beyond the datetime range."""
        with pytest.raises(ClaimValueMismatchError) as exc_info:
            parse_timestamp(10 ** 20, NumericMode.FIXED_PRECISION)

        assert "out of range" in str(exc_info.value)

    def test_non_finite_float(self):
        """Test infinity is out of range."""
        with pytest.raises(ClaimValueMismatchError):
            parse_timestamp(float("inf"), NumericMode.FLOAT)
