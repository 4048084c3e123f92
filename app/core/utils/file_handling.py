# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""File utilities for copying, reading, writing and archiving session files."""

from __future__ import annotations

import shutil
import zipfile
from typing import TYPE_CHECKING

from charset_normalizer import from_bytes

from .logger import setup_logging

if TYPE_CHECKING:
    from pathlib import Path

logger = setup_logging()

PSEUDO_SUFFIX = '-pseudo'
TEXT_ERRORS = 'surrogateescape'


def generate_file_name(file_name: str) -> str:
    """Insert ``-pseudo`` before the last extension, or append it without extension."""
    stem, dot, extension = file_name.rpartition('.')

    if not dot:
        return f'{file_name}{PSEUDO_SUFFIX}'

    return f'{stem}{PSEUDO_SUFFIX}.{extension}'


def copy_files_to_output(upload_dir: Path, output_dir: Path) -> list[Path]:
    """Copy every regular file of the upload folder under its pseudo name into the output folder."""
    if not upload_dir.is_dir():
        logger.warning('Upload folder "%s" does not exist, nothing to copy.', upload_dir)
        return []

    copied = []
    for source in sorted(upload_dir.iterdir()):
        if not source.is_file():
            continue

        target = output_dir / generate_file_name(source.name)
        shutil.copyfile(source, target)
        copied.append(target)

    if not copied:
        logger.info('No files to copy from "%s".', upload_dir)

    return copied


def list_output_files(output_dir: Path, suffixes: tuple[str, ...] = (), *, exclude: bool = False) -> list[Path]:
    """List regular files by case-insensitive suffix, or all files without the suffixes when excluding.

    Without suffixes every regular file is listed.
    """
    files = []

    for path in sorted(output_dir.iterdir()):
        if not path.is_file():
            continue

        if not suffixes or (path.suffix.lower() in suffixes) != exclude:
            files.append(path)

    return files


def detect_encoding(data: bytes) -> str | None:
    """Detect the text encoding of some content, None when it does not look like text."""
    if data.startswith(b'\xef\xbb\xbf'):
        return 'utf-8'  # <- UTF-8 BOM detected

    if not data:
        return 'utf-8'

    try:
        best_match = from_bytes(data).best()
    except (LookupError, ValueError, TypeError, OSError):
        logger.warning('Encoding detection failed, defaults to UTF-8 encoding.')
        return 'utf-8'

    if best_match is None or not getattr(best_match, 'encoding', None):
        return None

    encoding = best_match.encoding

    # ascii detection is treated as UTF-8
    if encoding.lower() == 'ascii':
        encoding = 'utf-8'

    # Normalize encoding name (utf_8 -> utf-8) for consistency
    return encoding.replace('_', '-')


def read_text_file(file_path: Path) -> tuple[str, str]:
    """Read a file as text in the encoding detected over its whole content.

    Content that is not text, or does not decode in the detected encoding, is
    read as UTF-8 with undecodable bytes kept as surrogate escapes. Writing it
    back with ``write_text_file`` restores those bytes unchanged.
    """
    data = file_path.read_bytes()
    encoding = detect_encoding(data)

    if encoding is not None:
        try:
            return data.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError):
            logger.warning('File "%s" cannot be decoded as %s, reading it as UTF-8.', file_path.name, encoding)
    else:
        logger.warning('File "%s" does not look like text, reading it as UTF-8.', file_path.name)

    return data.decode('utf-8', errors=TEXT_ERRORS), 'utf-8'


def write_text_file(file_path: Path, content: str, encoding: str = 'utf-8') -> None:
    """Write text without newline translation, surrogate escapes become their original bytes."""
    file_path.write_bytes(content.encode(encoding, errors=TEXT_ERRORS))


def create_zipfile(source_dir: Path, zip_path: Path) -> list[str]:
    """Zip every regular file of a folder without path prefix and return the archived names."""
    files_to_zip = list_output_files(source_dir) if source_dir.is_dir() else []
    included_files: list[str] = []

    try:
        zip_path.parent.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(zip_path, 'w', zipfile.ZIP_DEFLATED, compresslevel=9) as zipped_file:
            for file_path in files_to_zip:
                zipped_file.write(file_path, file_path.name)
                included_files.append(file_path.name)

    except OSError as error:
        logger.exception('Failed to create zip file "%s": %s', zip_path, error)
        raise

    logger.info('Archived %d file(s) into %s', len(included_files), zip_path.name)
    return included_files
