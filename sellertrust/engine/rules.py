"""Trust rules - derive IsVerified and HasVerifiedBadge from current facts."""

from collections.abc import Collection, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class BadgeRequirements:
    """Policy facts the badge decision needs, detached from storage."""

    allows_badge: bool
    min_certifications: int
    required_certifications: frozenset[str] = frozenset()

    @classmethod
    def from_policy(cls, policy) -> "BadgeRequirements":
        return cls(
            allows_badge=policy.allows_badge,
            min_certifications=policy.min_certifications,
            required_certifications=frozenset(policy.required_certifications or ()),
        )


def compute_is_verified(approved_cert_count: int, has_active_premium: bool) -> bool:
    """Verified with at least one approved certification or active premium."""
    return approved_cert_count > 0 or has_active_premium


def compute_has_badge(
    requirements: BadgeRequirements | None,
    approved_names: Collection[str],
) -> bool:
    """
    Badge eligibility, checked cheapest first:
    policy exists and allows badges, count >= minimum, then every required
    name present among approved names (case-insensitive, exact).
    """
    if requirements is None or not requirements.allows_badge:
        return False
    if len(approved_names) < requirements.min_certifications:
        return False
    if requirements.required_certifications:
        held = _fold(approved_names)
        if not _fold(requirements.required_certifications) <= held:
            return False
    return True


def _fold(names: Iterable[str]) -> set[str]:
    return {n.strip().casefold() for n in names}
