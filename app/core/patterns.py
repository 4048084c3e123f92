# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Resolve the regex patterns a file category is scrubbed with.

Built-in patterns can only be selected for log/text files; JSON and XML
documents are matched against the user patterns from ``regexSettings``.
"""

from __future__ import annotations

from typing import Any

from core.utils.logger import setup_logging

logger = setup_logging()

_OCTET = r'(25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])'

BUILTIN_PATTERNS = {
    'E-Mail': r'([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})',
    'IP-Adressen': rf'\b{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}\b',
}


def _list_field(settings_block: dict[str, Any], field: str) -> list:
    """Return a list field of a settings block, anything else counts as empty."""
    values = settings_block.get(field)
    return values if isinstance(values, list) else []


def _builtin_patterns(log_settings: dict[str, Any]) -> list[str]:
    """Map the checked built-in names to their patterns, ignoring unknown names."""
    checked = _list_field(log_settings, 'checkedOptions')
    return [BUILTIN_PATTERNS[name] for name in checked if isinstance(name, str) and name in BUILTIN_PATTERNS]


def resolve_patterns(settings: dict[str, Any] | None, file_category: str) -> list[str]:
    """Return the regex sources for a file category, never raising.

    Args:
        settings: settings object of a run (``logSettings``, ``regexSettings``, ...)
        file_category: ``log`` for log/text files, anything else for documents

    Returns:
        Built-in patterns checked in ``logSettings`` (log only) followed by the
        patterns of ``regexSettings``, an empty list when nothing applies.

    """
    try:
        log_settings = settings.get('logSettings')
        regex_settings = settings.get('regexSettings')
        patterns: list[str] = []

        if file_category == 'log':
            if log_settings is None and regex_settings is None:
                logger.warning('No settings provided for log files.')
                return []

            if log_settings is not None:
                patterns.extend(_builtin_patterns(log_settings))

        elif regex_settings is None:
            logger.debug('No regex patterns provided for "%s" files.', file_category)
            return []

        if regex_settings is not None:
            patterns.extend(_list_field(regex_settings, 'patterns'))

    except (AttributeError, TypeError) as error:
        logger.error('Cannot resolve patterns for "%s" files: %s', file_category, error)
        return []

    return patterns
