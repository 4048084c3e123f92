# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Per-session directory layout, cleanup and expiry sweep.

Every session owns three folders named after its id:
    - uploads/<session>/{other,json,xml}  raw uploads and generated configs
    - output/<session>                    pseudonymized copies
    - download/<session>                  the final ZIP archive
"""

from __future__ import annotations

import re
import shutil
import time
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from core.exceptions import InvalidSessionError
from core.utils.logger import setup_logging

if TYPE_CHECKING:
    from core.utils.config import PipelineConfig

logger = setup_logging()

SESSION_ID_PATTERN = re.compile(r'[A-Za-z0-9_-]+')
UPLOAD_CATEGORIES = ('other', 'json', 'xml')
ARCHIVE_NAME = 'pseudo-files.zip'


def validate_session_id(session_id: object) -> str:
    """Return the session id when it is safe to use as a directory name."""
    if not isinstance(session_id, str) or SESSION_ID_PATTERN.fullmatch(session_id) is None:
        raise InvalidSessionError(session_id)

    return session_id


class SessionPaths(NamedTuple):
    """Directories owned by one session."""

    session_id: str
    upload_dir: Path
    output_dir: Path
    download_dir: Path

    @classmethod
    def for_session(cls, config: PipelineConfig, session_id: str) -> SessionPaths:
        """Build the paths of a session below the configured roots."""
        session_id = validate_session_id(session_id)

        return cls(
            session_id=session_id,
            upload_dir=config.upload_root / session_id,
            output_dir=config.output_root / session_id,
            download_dir=config.download_root / session_id,
        )

    def upload_category_dir(self, category: str) -> Path:
        """Upload folder of a file category (``other``, ``json`` or ``xml``)."""
        return self.upload_dir / category

    def config_file(self, file_type: str) -> Path:
        """Path of the generated per-type config, e.g. ``uploads/S/json/json-config.json``."""
        return self.upload_dir / file_type / f'{file_type}-config.json'

    @property
    def archive_path(self) -> Path:
        """Path of the final ZIP archive."""
        return self.download_dir / ARCHIVE_NAME

    @property
    def all_dirs(self) -> tuple[Path, Path, Path]:
        """The three top-level folders of the session."""
        return self.upload_dir, self.output_dir, self.download_dir


def create_upload_dirs(paths: SessionPaths) -> None:
    """Create the upload folder of every file category."""
    for category in UPLOAD_CATEGORIES:
        paths.upload_category_dir(category).mkdir(parents=True, exist_ok=True)


def remove_session(config: PipelineConfig, session_id: str) -> None:
    """Delete every folder of a session."""
    paths = SessionPaths.for_session(config, session_id)

    for folder in paths.all_dirs:
        if folder.exists():
            shutil.rmtree(folder)

    logger.info('Removed session "%s"', session_id)


def _last_modified(paths: SessionPaths) -> float | None:
    """Most recent modification time of anything in the session folders."""
    timestamps = []

    for folder in paths.all_dirs:
        if not folder.exists():
            continue

        timestamps.append(folder.stat().st_mtime)
        timestamps.extend(entry.stat().st_mtime for entry in folder.rglob('*'))

    return max(timestamps, default=None)


def list_sessions(config: PipelineConfig) -> list[str]:
    """Session ids with a folder below any of the configured roots."""
    session_ids = set()

    for root in (config.upload_root, config.output_root, config.download_root):
        if root.is_dir():
            session_ids.update(
                entry.name
                for entry in root.iterdir()
                if entry.is_dir() and SESSION_ID_PATTERN.fullmatch(entry.name)
            )

    return sorted(session_ids)


def sweep_expired_sessions(config: PipelineConfig, now: float | None = None) -> list[str]:
    """Remove sessions idle for longer than the configured TTL and return their ids."""
    now = time.time() if now is None else now
    removed = []

    for session_id in list_sessions(config):
        last_modified = _last_modified(SessionPaths.for_session(config, session_id))

        if last_modified is not None and now - last_modified > config.session_ttl:
            remove_session(config, session_id)
            removed.append(session_id)

    if removed:
        logger.info('Swept %d expired session(s)', len(removed))

    return removed
