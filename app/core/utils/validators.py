# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Shape checks deciding how a value gets pseudonymized."""

from __future__ import annotations

import re

OCTET = r'(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])'

IPV4_PATTERN = re.compile(rf'^{OCTET}\.{OCTET}\.{OCTET}\.{OCTET}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def is_ipv4_address(value: object) -> bool:
    """Return True for a dotted-quad IPv4 string with octets 0-255 and no leading zeros."""
    return isinstance(value, str) and IPV4_PATTERN.fullmatch(value) is not None


def is_email_address(value: object) -> bool:
    """Return True for a ``local@domain.tld`` shaped string."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None
