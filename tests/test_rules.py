"""Unit tests for the trust rules."""

from sellertrust.engine.rules import BadgeRequirements, compute_has_badge, compute_is_verified


def test_verified_by_certification():
    """One approved certification is enough."""
    assert compute_is_verified(1, False) is True


def test_verified_by_premium_alone():
    """Premium verifies a seller with no certifications at all."""
    assert compute_is_verified(0, True) is True


def test_unverified_without_either():
    assert compute_is_verified(0, False) is False


def test_badge_requires_policy():
    """Five approved certifications, no policy - no badge."""
    names = ["ISO9001", "ISO14001", "CE", "RoHS", "UL"]
    assert compute_has_badge(None, names) is False


def test_badge_disallowed_by_policy():
    requirements = BadgeRequirements(allows_badge=False, min_certifications=0)
    assert compute_has_badge(requirements, ["ISO9001"]) is False


def test_badge_minimum_count():
    requirements = BadgeRequirements(allows_badge=True, min_certifications=2)
    assert compute_has_badge(requirements, ["ISO9001"]) is False
    assert compute_has_badge(requirements, ["ISO9001", "CE"]) is True


def test_badge_required_name_missing():
    """Count satisfied, required name absent."""
    requirements = BadgeRequirements(
        allows_badge=True,
        min_certifications=2,
        required_certifications=frozenset({"ISO9001"}),
    )
    assert compute_has_badge(requirements, ["ISO14001", "CE", "RoHS"]) is False


def test_badge_required_names_case_insensitive():
    requirements = BadgeRequirements(
        allows_badge=True,
        min_certifications=1,
        required_certifications=frozenset({"ISO9001", "ce"}),
    )
    assert compute_has_badge(requirements, ["iso9001", "CE"]) is True


def test_badge_required_names_are_exact_matches():
    """A longer name containing the required one does not count."""
    requirements = BadgeRequirements(
        allows_badge=True,
        min_certifications=0,
        required_certifications=frozenset({"ISO9001"}),
    )
    assert compute_has_badge(requirements, ["ISO9001:2015"]) is False


def test_badge_with_empty_requirements():
    requirements = BadgeRequirements(allows_badge=True, min_certifications=0)
    assert compute_has_badge(requirements, []) is True
