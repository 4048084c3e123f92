# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Per-session, per-type field configuration.

The config of a file type lives in ``uploads/<session>/<type>/<type>-config.json``:

    {
      "sources": ["field names or patterns to pseudonymize"],
      "derived": {"target.path": {"sources": ["a.b", "c"], "separator": "-"}}
    }

Merges only ever add entries, so merging the same settings twice leaves the
config unchanged.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from core.exceptions import ConfigReadError, UnknownConfigTypeError
from core.utils.logger import setup_logging

if TYPE_CHECKING:
    from pathlib import Path

    from core.utils.session_dirs import SessionPaths

logger = setup_logging()

SETTINGS_KEYS = {
    'json': 'jsonSettings',
    'xml': 'xmlSettings',
    'log': 'logSettings',
    'regex': 'regexSettings',
}
MERGED_FIELDS = ('checkedOptions', 'patterns')


def empty_config() -> dict[str, Any]:
    """Return the config of a type that was never merged."""
    return {'sources': [], 'derived': {}}


def _read_config(config_path: Path) -> dict[str, Any]:
    """Read a persisted config, or the empty config when the file does not exist yet."""
    if not config_path.exists():
        return empty_config()

    try:
        config = json.loads(config_path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ConfigReadError(config_path, error) from error

    if not isinstance(config, dict):
        raise ConfigReadError(config_path, 'config is not a JSON object')

    config.setdefault('sources', [])
    config.setdefault('derived', {})

    sources, derived = config['sources'], config['derived']

    if not isinstance(sources, list) or not all(isinstance(source, str) for source in sources):
        raise ConfigReadError(config_path, '"sources" must be a list of strings')

    if not isinstance(derived, dict):
        raise ConfigReadError(config_path, '"derived" must be an object')

    return config


def _write_config(config_path: Path, config: dict[str, Any]) -> None:
    """Persist a config as pretty-printed JSON."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding='utf-8')


def _collect_entries(settings_block: object) -> list[str]:
    """Collect the ``checkedOptions`` and ``patterns`` of a settings block."""
    if not isinstance(settings_block, dict):
        return []

    entries = []
    for field in MERGED_FIELDS:
        values = settings_block.get(field)

        if isinstance(values, list):
            entries.extend(value for value in values if isinstance(value, str))

    return entries


def _union(existing: list, additions: list) -> list:
    """Ordered union without duplicates, existing entries first."""
    return list(dict.fromkeys([*existing, *additions]))


def load_config(paths: SessionPaths, file_type: str) -> dict[str, Any]:
    """Load the config of a file type for a session."""
    if file_type not in SETTINGS_KEYS:
        raise UnknownConfigTypeError(file_type)

    return _read_config(paths.config_file(file_type))


def merge_config(paths: SessionPaths, settings: dict[str, Any], file_type: str) -> dict[str, Any]:
    """Merge the selected fields and patterns of the settings into the config of a file type.

    Entries come from the type specific settings block and from ``regexSettings``.
    Missing blocks or fields that are not lists count as empty.

    Raises:
        UnknownConfigTypeError: file type is not json, xml, log or regex
        ConfigReadError: the persisted config is unreadable

    """
    if file_type not in SETTINGS_KEYS:
        raise UnknownConfigTypeError(file_type)

    config_path = paths.config_file(file_type)
    config = _read_config(config_path)

    additions = _collect_entries(settings.get(SETTINGS_KEYS[file_type]))
    additions += _collect_entries(settings.get('regexSettings'))

    config['sources'] = _union(config['sources'], additions)
    _write_config(config_path, config)

    logger.debug('Merged %d entries into %s (%d sources)', len(additions), config_path.name, len(config['sources']))
    return config


def merge_config_definition(paths: SessionPaths, definition: dict[str, Any], file_type: str) -> dict[str, Any]:
    """Fold an uploaded config definition into the config of a file type.

    Sources are added to the existing ones; derived fields of the definition
    replace derived fields with the same target.
    """
    if file_type not in SETTINGS_KEYS:
        raise UnknownConfigTypeError(file_type)

    config_path = paths.config_file(file_type)
    config = _read_config(config_path)

    config['sources'] = _union(config['sources'], list(definition.get('sources', [])))
    config['derived'].update(definition.get('derived', {}))
    _write_config(config_path, config)

    logger.info('Merged uploaded config definition into %s', config_path.name)
    return config
