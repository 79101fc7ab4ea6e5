"""Ethereum address validation utilities."""

from __future__ import annotations

from eth_utils import is_hex_address, to_checksum_address

from ethnode_api.core.exceptions import InvalidAddressError

ADDRESS_HEX_LEN = 40  # 20 bytes


def normalize_address(raw: str) -> str:
    """
    Validate an account identifier and return its EIP-55 checksummed form.

    Accepts the 0x prefix or none, in any letter case. Checksums of mixed-case
    input are not enforced; the node resolves addresses case-insensitively.

    Raises:
        InvalidAddressError: empty, wrong length, or non-hex characters.
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidAddressError(raw, "address must be non-empty")
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) != ADDRESS_HEX_LEN:
        raise InvalidAddressError(
            raw, f"expected {ADDRESS_HEX_LEN} hex digits, got {len(digits)}"
        )
    if not is_hex_address("0x" + digits):
        raise InvalidAddressError(raw, "address contains non-hex characters")
    return to_checksum_address("0x" + digits.lower())


def is_valid_address(raw: str) -> bool:
    """Return True if raw is a well-formed 20-byte hex address."""
    try:
        normalize_address(raw)
        return True
    except InvalidAddressError:
        return False
