# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Prefix-preserving IPv4 pseudonymization (Crypto-PAn).

Each output bit ``i`` is the input bit ``i`` flipped by one bit of AES output,
where the AES input only depends on the first ``i`` input bits. Two addresses
sharing an n-bit prefix therefore share an n-bit prefix after pseudonymization.

The scheme needs a 32 byte key: the first 16 bytes are the AES key, the last 16
bytes are encrypted once to form the padding of every AES input block.
"""

from __future__ import annotations

import ipaddress

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from core.utils.logger import setup_logging

logger = setup_logging()

KEY_SIZE = 32
BLOCK_BITS = 128
ADDRESS_BITS = 32


def pad_key(secret: str) -> bytes:
    """Turn a secret into a Crypto-PAn key.

    The UTF-8 bytes of the secret are right-padded with zero bytes up to
    32 bytes. Longer secrets are truncated to their first 32 bytes.
    """
    key = secret.encode('utf-8')

    if len(key) > KEY_SIZE:
        logger.warning('Pseudonymization key exceeds %d bytes, IP pseudonyms only use the first %d', KEY_SIZE, KEY_SIZE)
        return key[:KEY_SIZE]

    return key.ljust(KEY_SIZE, b'\x00')


def ip_to_bytes(ip: str) -> bytes:
    """Convert a dotted-quad IPv4 address into its 4 bytes."""
    return ipaddress.IPv4Address(ip).packed


def bytes_to_ip(data: bytes) -> str:
    """Convert 4 bytes back into a dotted-quad IPv4 address."""
    return str(ipaddress.IPv4Address(bytes(data)))


class CryptoPan:
    """Crypto-PAn pseudonymizer for IPv4 addresses."""

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            message = f'Crypto-PAn key must be {KEY_SIZE} bytes, got {len(key)}.'
            raise ValueError(message)

        self._cipher = Cipher(algorithms.AES(key[:16]), modes.ECB())  # noqa: S305
        encryptor = self._cipher.encryptor()
        self._pad = int.from_bytes(encryptor.update(key[16:]), 'big')

    def _flip_bits(self, address: int) -> int:
        """Compute the 32 flip bits for an address, one AES block per prefix length."""
        # cipher contexts are not shareable between threads, so one per call
        encryptor = self._cipher.encryptor()
        flips = 0

        for position in range(ADDRESS_BITS):
            keep = BLOCK_BITS - position
            prefix = (address >> (ADDRESS_BITS - position)) << keep if position else 0
            block = prefix | (self._pad & ((1 << keep) - 1))

            output = encryptor.update(block.to_bytes(16, 'big'))
            flips |= (output[0] >> 7) << (ADDRESS_BITS - 1 - position)

        return flips

    def anonymize_bytes(self, data: bytes) -> bytes:
        """Pseudonymize a 4 byte IPv4 address."""
        if len(data) != ADDRESS_BITS // 8:
            message = f'Expected a 4 byte IPv4 address, got {len(data)} bytes.'
            raise ValueError(message)

        address = int.from_bytes(data, 'big')
        return (address ^ self._flip_bits(address)).to_bytes(4, 'big')

    def anonymize(self, ip: str) -> str:
        """Pseudonymize a dotted-quad IPv4 address."""
        return bytes_to_ip(self.anonymize_bytes(ip_to_bytes(ip)))
