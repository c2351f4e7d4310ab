"""
Pytest tests for gitlab_api/ids.py (group/project identifier handling).

Run:
    pytest gitlab_api/test_ids.py -v
"""

import pytest

from gitlab_api.exceptions import InvalidIdentifierError
from gitlab_api.ids import NamedID, NumericID, parse_id, path_segment


def test_parse_id_numeric_and_named():
    assert parse_id(42) == NumericID(42)
    assert parse_id("my-group") == NamedID("my-group")
    # Digit-only strings are still paths as far as the caller is concerned.
    assert parse_id("42") == NamedID("42")
    assert parse_id(NumericID(5)) == NumericID(5)
    assert parse_id(NamedID("a/b")) == NamedID("a/b")


@pytest.mark.parametrize("bad", [None, True, False, 1.5, 0, -3, "", "   ", ["a"], {"id": 1}])
def test_parse_id_rejects_invalid_shapes(bad):
    with pytest.raises(InvalidIdentifierError):
        parse_id(bad)


def test_invalid_identifier_is_a_value_error():
    with pytest.raises(ValueError):
        parse_id(object())


@pytest.mark.parametrize(
    "value, expected",
    [
        (42, "42"),
        ("my-group", "my-group"),
        ("parent/child", "parent%2Fchild"),
        ("my group", "my%20group"),
        ("a/b c/d", "a%2Fb%20c%2Fd"),
        (NamedID("x.y_z"), "x.y_z"),
    ],
)
def test_path_segment_percent_encodes(value, expected):
    assert path_segment(value) == expected


def test_named_id_is_kept_as_given():
    assert parse_id(" a b ") == NamedID(" a b ")
    assert path_segment(" a b ") == "%20a%20b%20"
