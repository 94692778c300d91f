import pytest

from msbcore.conversion import U64_MAX, convert_bounds, format_mode


def test_convert_bounds_exclusive():
    assert convert_bounds(1, 10) == (1, 9)


def test_convert_bounds_open_start():
    assert convert_bounds(None, 10) == (0, 9)


def test_convert_bounds_open_end():
    assert convert_bounds(1) == (1, U64_MAX)
    assert convert_bounds(1)[1] == 2**64 - 1


def test_convert_bounds_inclusive():
    assert convert_bounds(None, 10, inclusive=True) == (0, 10)


def test_convert_bounds_fully_open():
    assert convert_bounds() == (0, U64_MAX)


def test_convert_bounds_zero_exclusive_end_rejected():
    with pytest.raises(ValueError):
        convert_bounds(0, 0)


def test_convert_bounds_negative_rejected():
    with pytest.raises(ValueError):
        convert_bounds(-1, 5)


@pytest.mark.parametrize(
    "mode, expected",
    [
        (0o755, "-rwxr-xr-x"),
        (0o644, "-rw-r--r--"),
        (0o40755, "drwxr-xr-x"),
        (0o100644, "-rw-r--r--"),
        (0o120777, "lrwxrwxrwx"),
        (0o010644, "prw-r--r--"),
    ],
)
def test_format_mode(mode, expected):
    assert format_mode(mode) == expected


def test_format_mode_length_invariant():
    for mode in (0, 0o777, 0o140000, 0o060600, 0o020666):
        assert len(format_mode(mode)) == 10