"""Unit tests for byom.coordinates (DMS and decimal degree parsing)."""

import pytest

from byom.coordinates import dms_to_dd, parse_degrees


class TestDmsToDd:
    """Tests for DMS to decimal degrees conversion."""

    @pytest.mark.parametrize(
        "dms,expected",
        [
            ("39°38'25.72\"N", 39.640478),
            ("0°13'48.63\"W", -0.230175),
            ("33°51'54.5\"S", -33.865139),
            ("151°12'35\"E", 151.209722),
            ("  10°0'0\"N  ", 10.0),
            ("0° 13' 48.63\" W", -0.230175),
        ],
        ids=["north", "west", "south", "east-no-decimals", "surrounding-whitespace", "spaced-fields"],
    )
    def test_valid(self, dms: str, expected: float) -> None:
        assert dms_to_dd(dms) == pytest.approx(expected, abs=1e-6)

    @pytest.mark.parametrize(
        "dms",
        [
            "39.64",
            "39°38'25.72\"X",
            "39°60'00\"N",
            "39°38'60.5\"N",
            "",
        ],
        ids=["decimal", "bad-hemisphere", "sixty-minutes", "sixty-seconds", "empty"],
    )
    def test_invalid_raises(self, dms: str) -> None:
        with pytest.raises(ValueError, match="Invalid DMS format"):
            dms_to_dd(dms)


class TestParseDegrees:
    """Tests for accepting either decimal degrees or DMS."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("-0.2301", -0.2301),
            ("39.6404", 39.6404),
            ("0", 0.0),
            ("39°38'25.72\"N", 39.640478),
        ],
        ids=["negative-decimal", "decimal", "zero", "dms"],
    )
    def test_valid(self, value: str, expected: float) -> None:
        assert parse_degrees(value) == pytest.approx(expected, abs=1e-6)

    def test_garbage_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_degrees("north-ish")
