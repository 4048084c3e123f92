# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Error kinds raised by the pseudonymization pipeline."""

from __future__ import annotations


class PseudonymizationError(Exception):
    """Base class for all pipeline errors."""


class MissingSecretKeyError(PseudonymizationError):
    """No secret key is configured for pseudonym generation."""

    def __init__(self) -> None:
        super().__init__('No pseudonymization key configured, set PSEUDO_KEY in the environment.')


class UnknownConfigTypeError(PseudonymizationError):
    """An unsupported file category was passed to the config merger."""

    def __init__(self, file_type: str) -> None:
        self.file_type = file_type
        super().__init__(f'Unknown config type "{file_type}", expected one of: json, xml, log, regex.')


class ConfigReadError(PseudonymizationError):
    """A persisted per-type config could not be read or is not a JSON object."""

    def __init__(self, config_path: object, reason: object) -> None:
        self.config_path = config_path
        self.reason = reason
        super().__init__(f'Cannot read config "{config_path}": {reason}')


class PatternCompileError(PseudonymizationError):
    """A user-supplied regex pattern does not compile."""

    def __init__(self, pattern: str, reason: object) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'Invalid pattern "{pattern}": {reason}')


class ContentTransformError(PseudonymizationError):
    """A file could not be parsed, transformed or serialized."""

    def __init__(self, file_name: str, reason: object) -> None:
        self.file_name = file_name
        self.reason = reason
        super().__init__(f'Cannot pseudonymize "{file_name}": {reason}')


class InvalidSessionError(PseudonymizationError):
    """A session id cannot be used as a directory name."""

    def __init__(self, session_id: object) -> None:
        self.session_id = session_id
        super().__init__(f'Invalid session id: {session_id!r}')
