"""Bech32 addresses and account address filtering."""

from __future__ import annotations

from typing import Iterable

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
ACCOUNT_PREFIX = "cosmos"
MAX_ADDRESS_LENGTH = 255
_MAX_BECH32_LENGTH = 90
_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class AddressError(ValueError):
    """Raised when an address is malformed or has the wrong prefix."""


def _polymod(values: Iterable[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATORS):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    result: list[int] = []
    max_value = (1 << to_bits) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise AddressError("invalid data range")
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & max_value)
    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or ((acc << (to_bits - bits)) & max_value):
        raise AddressError("invalid padding when converting bits")
    return result


def bech32_encode(prefix: str, data: bytes) -> str:
    """Encode bytes as a bech32 string with the given human-readable prefix."""
    if not prefix:
        raise AddressError("empty bech32 prefix")
    words = _convert_bits(data, 8, 5, pad=True)
    combined = words + _create_checksum(prefix, words)
    return prefix + "1" + "".join(CHARSET[w] for w in combined)


def bech32_decode(address: str) -> tuple[str, bytes]:
    """Decode a bech32 string into its prefix and data bytes."""
    if len(address) > _MAX_BECH32_LENGTH:
        raise AddressError(f"invalid bech32 string length {len(address)}")
    if any(ord(c) < 33 or ord(c) > 126 for c in address):
        raise AddressError("invalid character in bech32 string")
    if address.lower() != address and address.upper() != address:
        raise AddressError("bech32 string is not all lowercase or all uppercase")

    address = address.lower()
    separator = address.rfind("1")
    if separator < 1 or separator + 7 > len(address):
        raise AddressError("invalid bech32 separator position")

    hrp, data_part = address[:separator], address[separator + 1:]
    if any(c not in CHARSET for c in data_part):
        raise AddressError("invalid character in bech32 data part")
    words = [CHARSET.index(c) for c in data_part]
    if _polymod(_hrp_expand(hrp) + words) != 1:
        raise AddressError("invalid bech32 checksum")

    return hrp, bytes(_convert_bits(words[:-6], 5, 8, pad=False))


def acc_address_from_bech32(address: str, prefix: str = ACCOUNT_PREFIX) -> bytes:
    """Return the bytes of an account address, checking its prefix and format."""
    if not address.strip():
        raise AddressError("empty address string is not allowed")

    hrp, data = bech32_decode(address)
    if hrp != prefix:
        raise AddressError(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
    if not data:
        raise AddressError("addresses cannot be empty")
    if len(data) > MAX_ADDRESS_LENGTH:
        raise AddressError(
            f"address max length is {MAX_ADDRESS_LENGTH}, got {len(data)}"
        )
    return data


def filter_non_account_addresses(
    addresses: Iterable[str], prefix: str = ACCOUNT_PREFIX
) -> list[str]:
    """Keep only the addresses that are valid account addresses."""
    accounts = []
    for address in addresses:
        try:
            acc_address_from_bech32(address, prefix)
        except AddressError:
            continue
        accounts.append(address)
    return accounts