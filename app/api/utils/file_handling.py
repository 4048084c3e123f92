# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""File utilities for the sessions of the pseudonymization API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.apps import apps

from core.utils.logger import setup_logging
from core.utils.session_dirs import SessionPaths

if TYPE_CHECKING:
    from pathlib import Path

    from django.core.files.uploadedfile import UploadedFile
    from rest_framework.request import Request

    from core.pseudonymizer import Pseudonymizer
    from core.utils.config import PipelineConfig

logger = setup_logging()


def get_pipeline() -> tuple[PipelineConfig, Pseudonymizer]:
    """Pipeline configuration and pseudonymizer built when the api app started."""
    app_config = apps.get_app_config('api')
    return app_config.pipeline_config, app_config.pseudonymizer


def get_session_id(request: Request, *, create: bool = True) -> str | None:
    """Session key of the request, starting a new session when asked to."""
    session = request.session

    if session.session_key is None and create:
        session['started'] = True
        session.save()

    return session.session_key


def get_session_paths(request: Request, *, create: bool = True) -> SessionPaths | None:
    """Folders of the request session, None when there is no session."""
    session_id = get_session_id(request, create=create)

    if session_id is None:
        return None

    config, _ = get_pipeline()
    return SessionPaths.for_session(config, session_id)


def store_uploaded_file(uploaded_file: UploadedFile, target_dir: Path, file_name: str) -> Path:
    """Write an uploaded file to a session upload folder in chunks."""
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / file_name

    with target.open('wb') as destination:
        for chunk in uploaded_file.chunks():
            destination.write(chunk)

    logger.debug('Stored upload %s in %s', file_name, target_dir)
    return target
