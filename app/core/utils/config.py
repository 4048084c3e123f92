# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Pipeline configuration, built once at process start and passed to every component."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

import environ

from core.exceptions import MissingSecretKeyError

DEFAULT_PSEUDONYM_LENGTH = 16
DEFAULT_SESSION_TTL = 3600  # <-- seconds
MAX_PSEUDONYM_LENGTH = 64  # <-- length of a SHA-256 hex digest


class PipelineConfig(NamedTuple):
    """Secret key and directory roots used by a pipeline run."""

    secret_key: str
    upload_root: Path
    output_root: Path
    download_root: Path
    pseudonym_length: int = DEFAULT_PSEUDONYM_LENGTH
    session_ttl: int = DEFAULT_SESSION_TTL

    @classmethod
    def for_data_root(
        cls,
        secret_key: str | None,
        data_root: str | Path,
        pseudonym_length: int = DEFAULT_PSEUDONYM_LENGTH,
        session_ttl: int = DEFAULT_SESSION_TTL,
    ) -> PipelineConfig:
        """Create a config with ``uploads``, ``output`` and ``download`` under one data root."""
        if not secret_key:
            raise MissingSecretKeyError

        if not 0 < pseudonym_length <= MAX_PSEUDONYM_LENGTH:
            message = f'Pseudonym length must be between 1 and {MAX_PSEUDONYM_LENGTH}, got {pseudonym_length}.'
            raise ValueError(message)

        root = Path(data_root)
        return cls(
            secret_key=secret_key,
            upload_root=root / 'uploads',
            output_root=root / 'output',
            download_root=root / 'download',
            pseudonym_length=pseudonym_length,
            session_ttl=session_ttl,
        )

    @classmethod
    def from_environment(cls, env_file: str | Path | None = None) -> PipelineConfig:
        """Read the configuration from environment variables (and an optional .env file)."""
        env = environ.FileAwareEnv(
            PSEUDO_DATA_ROOT=(str, 'data'),
            PSEUDONYM_LENGTH=(int, DEFAULT_PSEUDONYM_LENGTH),
            SESSION_TTL=(int, DEFAULT_SESSION_TTL),
        )

        if env_file is not None:
            environ.Env.read_env(env_file)

        return cls.for_data_root(
            secret_key=env('PSEUDO_KEY', default=None),
            data_root=env('PSEUDO_DATA_ROOT'),
            pseudonym_length=env('PSEUDONYM_LENGTH'),
            session_ttl=env('SESSION_TTL'),
        )
