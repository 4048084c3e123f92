# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Regex driven replacement of sensitive values in text."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from core.exceptions import PatternCompileError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from core.pseudonymizer import Pseudonymizer


class RegexAnonymizer:
    """Apply regex patterns to text and replace every match by its pseudonym.

    Patterns run one after another: each pass scans the output of the
    previous one, so a later pattern can match inside an earlier replacement.
    """

    def __init__(self, pseudonymizer: Pseudonymizer) -> None:
        self.pseudonymizer = pseudonymizer
        self._compiled: dict[str, re.Pattern[str]] = {}

    def compile_patterns(self, patterns: Iterable[str]) -> list[re.Pattern[str]]:
        """Compile all patterns up front, raising PatternCompileError for the first invalid one."""
        compiled = []

        for pattern in patterns:
            if not isinstance(pattern, str):
                raise PatternCompileError(repr(pattern), 'pattern must be a string')

            if pattern not in self._compiled:
                try:
                    self._compiled[pattern] = re.compile(pattern)
                except re.error as error:
                    raise PatternCompileError(pattern, error) from error

            compiled.append(self._compiled[pattern])

        return compiled

    def _replace_matches(self, text: str, regex: re.Pattern[str]) -> str:
        """Replace all matches, located in the unmodified text, from left to right."""
        pieces = []
        last_index = 0

        for match in regex.finditer(text):
            pieces.append(text[last_index : match.start()])
            pieces.append(self.pseudonymizer.pseudonymize_value(match.group()))
            last_index = match.end()

        pieces.append(text[last_index:])
        return ''.join(pieces)

    def pseudo_content_regex(self, text: str, patterns: Iterable[str]) -> str:
        """Pseudonymize every match of every pattern in the text.

        Matched IPv4 addresses, email addresses and other values each get
        their own kind of pseudonym. Text outside the matches is kept as is.

        Raises:
            PatternCompileError: a pattern is not a valid regex
            TypeError: the content is not text

        """
        if not isinstance(text, str):
            message = f'Expected text content, got {type(text).__name__}'
            raise TypeError(message)

        result = text
        for regex in self.compile_patterns(patterns):
            result = self._replace_matches(result, regex)

        return result
