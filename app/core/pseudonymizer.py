# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Keyed pseudonym generators for generic values, email addresses and IPv4 addresses.

This module provides the Pseudonymizer, which holds the secret key for one
process and is handed to every component that replaces sensitive values:
    - generic values become a truncated HMAC-SHA256 hex digest
    - email addresses keep their shape and top-level domain
    - IPv4 addresses are pseudonymized prefix-preserving (Crypto-PAn)
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import TYPE_CHECKING

from core.crypto_pan import CryptoPan, pad_key
from core.exceptions import MissingSecretKeyError
from core.utils.config import DEFAULT_PSEUDONYM_LENGTH
from core.utils.validators import is_email_address, is_ipv4_address

if TYPE_CHECKING:
    from core.utils.config import PipelineConfig


def to_text(value: object) -> str:
    """Render a document value as text, non-strings as their JSON representation."""
    if isinstance(value, str):
        return value

    if value is None:
        return ''

    return json.dumps(value, ensure_ascii=False, separators=(',', ':'), sort_keys=True)


class Pseudonymizer:
    """Deterministic, keyed pseudonym generation."""

    def __init__(self, secret_key: str, pseudonym_length: int = DEFAULT_PSEUDONYM_LENGTH) -> None:
        if not secret_key:
            raise MissingSecretKeyError

        self._hmac_key = secret_key.encode('utf-8')
        self.pseudonym_length = pseudonym_length
        self._crypto_pan = CryptoPan(pad_key(secret_key))

    @classmethod
    def from_config(cls, config: PipelineConfig) -> Pseudonymizer:
        """Create the pseudonymizer for a pipeline configuration."""
        return cls(config.secret_key, config.pseudonym_length)

    def generate_pseudonym(self, value: object) -> str:
        """Return the pseudonym of a value, stable for the same value and key."""
        # Bytes that were not decodable in a log file hash as those original bytes
        message = to_text(value).encode('utf-8', errors='surrogateescape')
        digest = hmac.new(self._hmac_key, message, hashlib.sha256).hexdigest()
        return digest[: self.pseudonym_length]

    def pseudonymize_email(self, email: str) -> str:
        """Pseudonymize the local part and the domain of an email, keeping the top-level domain.

        ``max@mail.test.com`` becomes ``<pseudo>@<pseudo>.com``, where the
        domain pseudonym is generated from ``mail.test``.

        Raises:
            ValueError: when the address has no ``@`` or no dot in its domain.

        """
        local_part, separator, domain = email.partition('@')
        domain_name, dot, top_level_domain = domain.rpartition('.')

        if not separator or not dot:
            message = f'Not an email address: {email!r}'
            raise ValueError(message)

        pseudo_local = self.generate_pseudonym(local_part)
        pseudo_domain = self.generate_pseudonym(domain_name)
        return f'{pseudo_local}@{pseudo_domain}.{top_level_domain}'

    def pseudonymize_ip(self, ip: str) -> str:
        """Pseudonymize an IPv4 address, preserving shared network prefixes."""
        return self._crypto_pan.anonymize(ip)

    def pseudonymize_value(self, value: object) -> str:
        """Pseudonymize a value by its shape: IPv4 address, email address or anything else."""
        if is_ipv4_address(value):
            return self.pseudonymize_ip(value)

        if is_email_address(value):
            return self.pseudonymize_email(value)

        return self.generate_pseudonym(value)
