import pytest

from bitcoin_da_client.errors import InvalidReference
from bitcoin_da_client.types import VersionHash

HEX = "01" + "ab" * 31


def test_parse_normalizes_prefix_and_case():
    a = VersionHash.parse(HEX)
    b = VersionHash.parse("0x" + HEX.upper())
    c = VersionHash.parse("  0X" + HEX + "  ")
    assert a == b == c
    assert str(a) == HEX
    assert a.prefixed == "0x" + HEX
    assert len(a.to_bytes()) == 32
    assert hash(a) == hash(b)


def test_parse_is_identity_on_version_hash():
    vh = VersionHash.parse(HEX)
    assert VersionHash.parse(vh) is vh


@pytest.mark.parametrize(
    "bad",
    [
        "",
        "0x",
        "deadbeef",
        HEX[:-1],
        HEX + "00",
        "zz" + HEX[2:],
        "0x0x" + HEX[4:],
        "../" + HEX,
        None,
        123,
        b"\x01" * 32,
    ],
)
def test_parse_rejects_malformed(bad):
    with pytest.raises(InvalidReference):
        VersionHash.parse(bad)
    assert VersionHash.is_valid(bad) is False


def test_direct_construction_requires_normalized_form():
    with pytest.raises(InvalidReference):
        VersionHash(HEX.upper())
    with pytest.raises(InvalidReference):
        VersionHash("0x" + HEX)
