# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Per-format processors pseudonymizing the files in a session output folder.

    - log/text: regex patterns (built-ins and user patterns) over the whole content
    - JSON:     source fields, derived fields, then user patterns over the serialized document
    - XML:      as JSON, on the dict tree of the document
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from lxml import etree

from core.exceptions import ContentTransformError
from core.patterns import resolve_patterns
from core.traversal import apply_derived_fields, apply_source_fields
from core.utils.file_handling import list_output_files, read_text_file, write_text_file
from core.utils.logger import setup_logging
from core.xml_tree import TEXT_KEY, build_xml, parse_xml

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from core.pseudonymizer import Pseudonymizer
    from core.regex_anonymizer import RegexAnonymizer

logger = setup_logging()

JSON_SUFFIX = '.json'
XML_SUFFIX = '.xml'
STRUCTURED_SUFFIXES = (JSON_SUFFIX, XML_SUFFIX)


def process_log_files(output_dir: Path, settings: dict[str, Any], anonymizer: RegexAnonymizer) -> list[Path]:
    """Pseudonymize every file that is not JSON or XML as text, keeping its encoding."""
    patterns = resolve_patterns(settings, 'log')
    anonymizer.compile_patterns(patterns)
    processed = []

    if not patterns:
        logger.info('No patterns selected for log files, copies are left as uploaded.')
        return processed

    for file_path in list_output_files(output_dir, STRUCTURED_SUFFIXES, exclude=True):
        text, encoding = read_text_file(file_path)

        try:
            write_text_file(file_path, anonymizer.pseudo_content_regex(text, patterns), encoding)
        except (TypeError, UnicodeEncodeError) as error:
            raise ContentTransformError(file_path.name, error) from error

        logger.debug('Pseudonymized log file %s (%s)', file_path.name, encoding)
        processed.append(file_path)

    return processed


def process_json_files(
    output_dir: Path,
    settings: dict[str, Any],
    config: dict[str, Any],
    anonymizer: RegexAnonymizer,
) -> list[Path]:
    """Pseudonymize the configured fields and pattern matches of every JSON file."""
    patterns = resolve_patterns(settings, 'other')
    anonymizer.compile_patterns(patterns)
    pseudonymize = anonymizer.pseudonymizer.pseudonymize_value
    processed = []

    for file_path in list_output_files(output_dir, (JSON_SUFFIX,)):
        try:
            document = json.loads(file_path.read_bytes())

            apply_source_fields(document, config['sources'], pseudonymize)
            apply_derived_fields(document, config['derived'])

            content = json.dumps(document, ensure_ascii=False, separators=(',', ':'))
            content = anonymizer.pseudo_content_regex(content, patterns)
        except (ValueError, TypeError, AttributeError, RecursionError) as error:
            raise ContentTransformError(file_path.name, error) from error

        write_text_file(file_path, content)
        logger.debug('Pseudonymized JSON file %s', file_path.name)
        processed.append(file_path)

    return processed


def _xml_field_transform(pseudonymizer: Pseudonymizer) -> Callable[[Any], Any]:
    """Build the source field transform for XML trees.

    Elements with attributes or children carry their text in ``#text``;
    repeated elements are pseudonymized one by one.
    """

    def transform(value: Any) -> Any:
        if value is None:
            return None

        if isinstance(value, list):
            return [transform(item) for item in value]

        if isinstance(value, dict):
            if value.get(TEXT_KEY) is not None:
                value[TEXT_KEY] = pseudonymizer.pseudonymize_value(value[TEXT_KEY])
            return value

        return pseudonymizer.pseudonymize_value(value)

    return transform


def process_xml_files(
    output_dir: Path,
    settings: dict[str, Any],
    config: dict[str, Any],
    anonymizer: RegexAnonymizer,
) -> list[Path]:
    """Pseudonymize the configured fields and pattern matches of every XML file."""
    patterns = resolve_patterns(settings, 'other')
    anonymizer.compile_patterns(patterns)
    transform = _xml_field_transform(anonymizer.pseudonymizer)
    processed = []

    for file_path in list_output_files(output_dir, (XML_SUFFIX,)):
        try:
            tree = parse_xml(file_path.read_bytes())

            apply_source_fields(tree, config['sources'], transform)
            apply_derived_fields(tree, config['derived'])

            content = build_xml(tree).decode('utf-8')
            content = anonymizer.pseudo_content_regex(content, patterns)
        except (etree.LxmlError, ValueError, TypeError, AttributeError, RecursionError) as error:
            raise ContentTransformError(file_path.name, error) from error

        write_text_file(file_path, content)
        logger.debug('Pseudonymized XML file %s', file_path.name)
        processed.append(file_path)

    return processed
