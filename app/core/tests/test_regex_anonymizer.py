# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Tests for regex driven content pseudonymization."""

from __future__ import annotations

import pytest

from core.exceptions import PatternCompileError
from core.patterns import BUILTIN_PATTERNS
from core.pseudonymizer import Pseudonymizer
from core.regex_anonymizer import RegexAnonymizer

EMAIL = BUILTIN_PATTERNS['E-Mail']
IP = BUILTIN_PATTERNS['IP-Adressen']


# ----------------------------------- FIXTURES ------------------------------------ #


@pytest.fixture
def pseudonymizer() -> Pseudonymizer:
    """Pseudonymizer with a fixed test key."""
    return Pseudonymizer('test-pseudo-key')


@pytest.fixture
def anonymizer(pseudonymizer: Pseudonymizer) -> RegexAnonymizer:
    """Regex anonymizer using the test pseudonymizer."""
    return RegexAnonymizer(pseudonymizer)


# ---------------------------- PSEUDO CONTENT REGEX TESTS ----------------------------- #


class TestPseudoContentRegex:
    """Tests for replacing regex matches by pseudonyms."""

    def test_non_destructive(self, anonymizer: RegexAnonymizer) -> None:
        """Matches are replaced, the text around them is kept."""
        result = anonymizer.pseudo_content_regex('IP: 192.168.1.1 Email: test@example.com', [IP, EMAIL])

        assert '192.168.1.1' not in result
        assert 'test@example.com' not in result
        assert result.startswith('IP: ')
        assert ' Email: ' in result

    def test_replacement_by_kind(self, anonymizer: RegexAnonymizer, pseudonymizer: Pseudonymizer) -> None:
        """IP and email matches get their own pseudonym kind."""
        result = anonymizer.pseudo_content_regex('from 10.0.0.1 by a@b.nl', [IP, EMAIL])

        ip = pseudonymizer.pseudonymize_ip('10.0.0.1')
        email = pseudonymizer.pseudonymize_email('a@b.nl')
        assert result == f'from {ip} by {email}'

    def test_left_to_right_with_length_changes(
        self,
        anonymizer: RegexAnonymizer,
        pseudonymizer: Pseudonymizer,
    ) -> None:
        """Replacements longer than their match do not shift later matches."""
        result = anonymizer.pseudo_content_regex('id=1; id=22; id=333', [r'\d+'])

        expected = '; '.join(f'id={pseudonymizer.generate_pseudonym(number)}' for number in ('1', '22', '333'))
        assert result == expected

    def test_unicode_and_whitespace_kept(self, anonymizer: RegexAnonymizer, pseudonymizer: Pseudonymizer) -> None:
        """Unmatched text keeps its exact characters."""
        text = 'Grüße\t✓ 10.0.0.1\r\n  ünd   mehr\n'

        result = anonymizer.pseudo_content_regex(text, [IP])

        assert result == text.replace('10.0.0.1', pseudonymizer.pseudonymize_ip('10.0.0.1'))

    def test_sequential_passes(self, anonymizer: RegexAnonymizer, pseudonymizer: Pseudonymizer) -> None:
        """A later pattern scans the output of the earlier ones."""
        result = anonymizer.pseudo_content_regex('abc', ['abc', '[0-9a-f]{16}'])

        assert result == pseudonymizer.generate_pseudonym(pseudonymizer.generate_pseudonym('abc'))

    def test_no_patterns(self, anonymizer: RegexAnonymizer) -> None:
        """Without patterns the text is unchanged."""
        assert anonymizer.pseudo_content_regex('user@example.com', []) == 'user@example.com'

    def test_no_matches(self, anonymizer: RegexAnonymizer) -> None:
        """Text without matches is unchanged."""
        assert anonymizer.pseudo_content_regex('nothing to see', [IP, EMAIL]) == 'nothing to see'

    def test_invalid_pattern(self, anonymizer: RegexAnonymizer) -> None:
        """Invalid patterns raise PatternCompileError naming the pattern."""
        with pytest.raises(PatternCompileError) as error_info:
            anonymizer.pseudo_content_regex('text', [IP, '(unclosed'])

        assert error_info.value.pattern == '(unclosed'

    def test_invalid_pattern_leaves_text(self, anonymizer: RegexAnonymizer) -> None:
        """All patterns compile before the first replacement."""
        text = 'mail a@b.nl'

        with pytest.raises(PatternCompileError):
            anonymizer.pseudo_content_regex(text, [EMAIL, '[z-a]'])

        assert text == 'mail a@b.nl'

    def test_non_string_pattern(self, anonymizer: RegexAnonymizer) -> None:
        """Patterns must be strings."""
        with pytest.raises(PatternCompileError, match='must be a string'):
            anonymizer.compile_patterns([42])

    def test_non_text_content(self, anonymizer: RegexAnonymizer) -> None:
        """Content must be text."""
        with pytest.raises(TypeError, match='Expected text content'):
            anonymizer.pseudo_content_regex(b'bytes', [IP])

    def test_compiled_patterns_cached(self, anonymizer: RegexAnonymizer) -> None:
        """Each pattern is compiled once per anonymizer."""
        first = anonymizer.compile_patterns([IP])
        second = anonymizer.compile_patterns([IP])

        assert first[0] is second[0]
