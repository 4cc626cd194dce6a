"""
Claim verification engine.
"""

from typing import Any, Iterable, Mapping, Optional

from ..shared.errors import (
    ClaimsValidationError, ClaimTypeMismatchError, InvalidClaimError
)
from ..shared.logging import get_logger
from .models import ClaimFailure, ClaimRule, FailureKind, VerificationOutcome


class RuleEngine:
    """Evaluates claim rules against a decoded claim mapping."""

    def __init__(self):
        self.logger = get_logger("verifier.rule_engine")

    def evaluate(self, claims: Mapping[str, Any], rules: Iterable[ClaimRule]) -> VerificationOutcome:
        """Evaluate every rule in order and collect all failures."""
        outcome = VerificationOutcome()

        for rule in rules:
            failure = self._evaluate_rule(rule, claims)
            if failure is None:
                continue

            outcome.failures.append(failure)
            self.logger.debug(
                "Claim rule failed",
                claim=failure.key,
                kind=failure.kind.value
            )

        if not outcome.valid:
            self.logger.warning(
                "Claim verification failed",
                failure_count=len(outcome.failures),
                claims=[failure.key for failure in outcome.failures]
            )

        return outcome

    def verify(self, claims: Mapping[str, Any], rules: Iterable[ClaimRule]) -> None:
        """Evaluate the rules and raise one aggregated error if any failed."""
        outcome = self.evaluate(claims, rules)
        if not outcome.valid:
            raise ClaimsValidationError(outcome.failures)

    def _evaluate_rule(self, rule: ClaimRule, claims: Mapping[str, Any]) -> Optional[ClaimFailure]:
        """Evaluate a single rule."""
        if rule.key not in claims:
            return ClaimFailure(key=rule.key, kind=FailureKind.NOT_FOUND)

        if rule.predicate is None:
            return None

        try:
            rule.predicate(claims[rule.key])
        except InvalidClaimError as e:
            kind = FailureKind.TYPE_MISMATCH if isinstance(e, ClaimTypeMismatchError) else FailureKind.VALUE_MISMATCH
            return ClaimFailure(key=rule.key, kind=kind, reason=e.message)
        except (ValueError, TypeError) as e:
            # Caller-written predicates may signal rejection with builtin errors.
            return ClaimFailure(key=rule.key, kind=FailureKind.INVALID, reason=str(e))

        return None


_default_engine = RuleEngine()


def verify_claims(claims: Mapping[str, Any], rules: Iterable[ClaimRule]) -> None:
    """Verify ``claims`` against ``rules`` with the shared engine."""
    _default_engine.verify(claims, rules)
