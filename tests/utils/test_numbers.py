import pytest

from svdhtml.core.exceptions import MalformedNumber
from svdhtml.utils.numbers import parse_bool, parse_int, parse_optional_int


@pytest.mark.parametrize(
    "token, expected",
    [
        ("16", 16),
        ("0x10", 16),
        ("0X10", 16),
        ("  0x10\n", 16),
        ("#10000", 16),
        ("0b10000", 16),
        ("0xdeadBEEF", 0xDEADBEEF),
        ("0", 0),
    ],
)
def test_parse_int_forms(token, expected):
    assert parse_int(token) == expected


@pytest.mark.parametrize(
    "token",
    ["", "   ", "0x", "#", "0xZZ", "12a", "-1", "+4", "1_000", "0x 10", "#102", "sixteen"],
)
def test_parse_int_rejects(token):
    with pytest.raises(MalformedNumber) as excinfo:
        parse_int(token, "addressOffset")

    assert excinfo.value.element == "addressOffset"


def test_parse_int_none_is_malformed():
    with pytest.raises(MalformedNumber):
        parse_int(None)


def test_parse_optional_int():
    assert parse_optional_int(None) is None
    assert parse_optional_int("0x20") == 32


@pytest.mark.parametrize(
    "token, expected",
    [("true", True), ("TRUE", True), ("1", True), ("false", False), ("0", False)],
)
def test_parse_bool(token, expected):
    assert parse_bool(token) is expected


def test_parse_bool_default():
    assert parse_bool(None) is False
    assert parse_bool(None, default=True) is True
