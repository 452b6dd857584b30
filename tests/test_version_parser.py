"""Tests for base version derivation."""

import pytest

from versioning.parser import MalformedVersionError, get_base_version, split_version


def test_base_version_of_full_version():
    assert get_base_version("3.3.1") == "3.3"


def test_base_version_of_two_segments():
    assert get_base_version("10.1") == "10.1"


def test_base_version_keeps_qualifiers_after_minor():
    assert get_base_version("1.15.0-rc1") == "1.15"
    assert get_base_version("2.7.1.RELEASE") == "2.7"


def test_single_segment_is_malformed():
    with pytest.raises(MalformedVersionError) as exc_info:
        get_base_version("3")
    assert "malformed" in str(exc_info.value)


def test_empty_string_is_malformed():
    with pytest.raises(MalformedVersionError):
        get_base_version("")


def test_malformed_version_is_value_error():
    assert issubclass(MalformedVersionError, ValueError)


def test_split_version_does_not_interpret_segments():
    assert split_version("01.2.x") == ["01", "2", "x"]
