"""Acceptance rule for automatic patch-level dependency upgrades."""

from constants import Constants

from .parser import split_version


def has_prerelease_marker(version: str) -> bool:
    """Return True if ``version`` contains an rc/alpha/beta marker, in any case."""
    lowered = version.lower()
    return any(marker in lowered for marker in Constants.PRERELEASE_MARKERS)


def is_acceptable_patch(candidate: str, current: str) -> bool:
    """Decide whether ``candidate`` is an acceptable patch upgrade over ``current``.

    Only strict ``major.minor.patch`` pins are eligible. The candidate must
    carry the same number of segments and textually equal major and minor
    segments; everything from the patch segment on is free to vary.
    Pre-release markers anywhere in the candidate reject it outright.
    Never raises.
    """
    if not isinstance(candidate, str) or not isinstance(current, str):
        return False

    if has_prerelease_marker(candidate):
        return False

    candidate_split = split_version(candidate)
    current_split = split_version(current)

    if len(current_split) != 3:
        return False
    if len(candidate_split) != len(current_split):
        return False
    if candidate_split[0] != current_split[0]:
        return False
    if candidate_split[1] != current_split[1]:
        return False
    return True
