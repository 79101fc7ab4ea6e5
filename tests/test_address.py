"""
Address validation: prefix/case handling and rejection reasons.
"""

from __future__ import annotations

import pytest

from ethnode_api.core.exceptions import InvalidAddressError
from ethnode_api.ethereum.address import is_valid_address, normalize_address

VALID_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def test_normalize_checksums():
    assert normalize_address(VALID_ADDRESS.lower()) == VALID_ADDRESS
    assert normalize_address(VALID_ADDRESS.upper().replace("0X", "0x")) == VALID_ADDRESS
    assert normalize_address(VALID_ADDRESS[2:]) == VALID_ADDRESS
    assert normalize_address(f"  {VALID_ADDRESS}\n") == VALID_ADDRESS


def test_zero_address_is_valid():
    assert normalize_address(ZERO_ADDRESS) == ZERO_ADDRESS


def test_empty_rejected():
    with pytest.raises(InvalidAddressError, match="non-empty"):
        normalize_address("")
    with pytest.raises(InvalidAddressError, match="non-empty"):
        normalize_address("   ")


def test_wrong_length_rejected():
    with pytest.raises(InvalidAddressError, match="expected 40 hex digits, got 4"):
        normalize_address("0x1234")
    with pytest.raises(InvalidAddressError, match="got 42"):
        normalize_address("0x" + "a" * 42)


@pytest.mark.parametrize(
    "bad",
    [
        "0x" + "g" * 40,
        "0x0x" + "a" * 38,
        "0x" + "a" * 19 + " " + "a" * 20,
        "-" + "a" * 39,
        "0x" + "a" * 38 + "_1",
    ],
)
def test_non_hex_rejected(bad):
    with pytest.raises(InvalidAddressError, match="non-hex"):
        normalize_address(bad)


def test_error_is_value_error():
    """Callers that only know ValueError still catch it."""
    with pytest.raises(ValueError):
        normalize_address("nope")


def test_is_valid_address():
    assert is_valid_address(VALID_ADDRESS) is True
    assert is_valid_address("0x1234") is False
    assert is_valid_address("") is False
