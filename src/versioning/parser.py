"""Version string utilities shared by the audit and the publisher."""

from typing import List


class MalformedVersionError(ValueError):
    """Raised when a version string lacks the segments an operation needs."""


def split_version(version: str) -> List[str]:
    """Split a version on '.' without interpreting the segments."""
    return version.split(".")


def get_base_version(version: str) -> str:
    """Return the ``major.minor`` prefix of ``version``.

    Raises:
        MalformedVersionError: if fewer than two segments are present.
    """
    split = split_version(version)
    if len(split) < 2:
        raise MalformedVersionError(f"version is malformed: '{version}'")
    return f"{split[0]}.{split[1]}"
