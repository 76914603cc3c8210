"""Field coercion helpers shared by every request payload."""

import pytest

from techasset.validation import INT_MAX, INT_MIN, ValidationError, to_body, to_int


def test_to_body_accepts_objects_and_missing_bodies():
    assert to_body({"name": "Office365"}) == {"name": "Office365"}
    assert to_body(None) == {}


@pytest.mark.parametrize("value", [[], ["title"], "Office365", 0, 3.5, True])
def test_to_body_rejects_other_json(value):
    with pytest.raises(ValidationError, match="Request body must be a JSON object"):
        to_body(value)


@pytest.mark.parametrize("value, expected", [
    ("50", 50),
    (12, 12),
    (4.0, 4),
    ("7.0", 7),
    ("", None),
    (None, None),
    (INT_MAX, INT_MAX),
    (INT_MIN, INT_MIN),
])
def test_to_int_parses(value, expected):
    assert to_int(value, "count") == expected


@pytest.mark.parametrize("value", [10 ** 20, -(10 ** 20), str(INT_MAX + 1), 1e30])
def test_to_int_rejects_out_of_range(value):
    with pytest.raises(ValidationError, match="count is out of range"):
        to_int(value, "count")


@pytest.mark.parametrize("value", ["abc", 2.5, "1e400"])
def test_to_int_rejects_non_integers(value):
    with pytest.raises(ValidationError, match="count must be an integer"):
        to_int(value, "count")
