import pytest

from sodiumlib.convert import (
    btoa,
    btoh,
    ctob,
    ctod,
    ctoi,
    ctow,
    htoi,
    itoa,
    itoh,
    wtoa,
    wtoh,
    xtoi,
)


def test_itoa_documented_example():
    assert itoa(345) == "345"


@pytest.mark.parametrize("number", [0, 7, -7, 345, -345, 2147483647, -2147483647])
def test_itoa_ctoi_round_trip(number):
    assert ctoi(itoa(number)) == number


@pytest.mark.parametrize("number", [0, 1, 345, 65535, 4294967295])
def test_ctod_reads_itoa_output(number):
    assert ctod(str(number)) == number


def test_ctod_wraps_at_32_bits():
    assert ctod("4294967296") == ctod("0")


def test_ctow_range_and_wrap():
    assert ctow("65535") == 65535
    assert ctow("65536") == ctow("0")


def test_ctob_range_and_wrap():
    assert ctob("255") == 255
    assert ctob("256") == ctob("0")


def test_empty_text_parses_as_zero():
    assert ctod("") == 0
    assert ctoi("") == 0


@pytest.mark.parametrize(
    "function, text",
    [(ctod, "12a"), (ctow, "-1"), (ctob, " 1"), (ctoi, "12-3"), (ctoi, "3a")],
)
def test_invalid_digits_raise(function, text):
    with pytest.raises(ValueError):
        function(text)


def test_ctoi_negative():
    assert ctoi("-345") == -345


def test_ctoi_negative_keeps_digits_right_of_junk():
    assert ctoi("-1a2") == -2


def test_ctoi_wraps_like_32_bit_int():
    assert ctoi("2147483648") == ctoi("-2147483648")


@pytest.mark.parametrize("number", [0, 1, 15, 16, 255, 0xFFFF, 0x7FFFFFFF, -1])
def test_itoh_htoi_round_trip(number):
    assert htoi(itoh(number)) == number


def test_itoh_uses_two_complement_for_negatives():
    assert itoh(-1) == "FFFFFFFF"
    assert itoh(0xFFFFFFFF) == itoh(-1)


def test_itoh_is_upper_case():
    assert itoh(0xFF) == "FF"
    assert itoh(0) == "0"


def test_wtoh_and_btoh():
    assert wtoh(0xFFFF) == "FFFF"
    assert wtoh(0x10000) == wtoh(0)
    assert btoh(0xAB) == "AB"
    assert btoh(0x100) == btoh(0)


def test_wtoa_and_btoa():
    assert wtoa(65535) == "65535"
    assert wtoa(65536) == wtoa(0)
    assert btoa(255) == "255"
    assert btoa(256) == btoa(0)


def test_htoi_ignores_case():
    assert htoi("ff") == htoi("FF")
    assert htoi("FF") == 255


def test_htoi_stops_at_nul():
    assert htoi("1A\0FF") == htoi("1A")


def test_xtoi_with_prefix():
    assert xtoi("0x1A") == htoi("1A")
    assert xtoi("0xff") == 255


def test_xtoi_with_suffix():
    assert xtoi("1Ah") == htoi("1A")
    assert xtoi("FFh") == 255


def test_xtoi_decimal():
    assert xtoi("345") == 345
    assert xtoi("-12") == -12


def test_xtoi_prefix_beyond_text_is_zero():
    assert xtoi("x") == htoi("")