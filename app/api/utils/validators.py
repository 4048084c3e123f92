# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Validators for uploaded files of the pseudonymization API."""

from __future__ import annotations

import json
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from rest_framework import serializers

from api.serializers import ConfigDefinitionSerializer
from core.utils.logger import setup_logging

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

logger = setup_logging()

UPLOAD_CATEGORIES = ('json', 'xml', 'other')
RESERVED_NAMES = ('json-config.json', 'xml-config.json')


def upload_category(button_type: str | None) -> str:
    """Map the ``buttonType`` query parameter to an upload folder, unknown types are ``other``."""
    return button_type if button_type in UPLOAD_CATEGORIES else 'other'


def validate_file_name(uploaded_file: UploadedFile) -> str:
    """Return the bare file name of an upload, rejecting names that are not usable on disk."""
    file_name = PurePath(uploaded_file.name or '').name

    if file_name in ('', '.', '..'):
        message = f'Invalid file name: "{uploaded_file.name}".'
        raise serializers.ValidationError(message)

    return file_name


def validate_config_definition(uploaded_file: UploadedFile) -> dict[str, Any]:
    """Parse and validate an uploaded config definition file."""
    file_name = validate_file_name(uploaded_file)

    if file_name in RESERVED_NAMES:
        message = f'"{file_name}" is reserved for the generated config, rename the file.'
        raise serializers.ValidationError(message)

    try:
        data = json.loads(uploaded_file.read())
    except (ValueError, UnicodeDecodeError) as error:
        message = f'"{file_name}" is not a valid JSON file: {error}'
        raise serializers.ValidationError(message) from error
    finally:
        uploaded_file.seek(0)

    serializer = ConfigDefinitionSerializer(data=data)

    if not serializer.is_valid():
        logger.info('Rejected config definition "%s": %s', file_name, serializer.errors)
        raise serializers.ValidationError({file_name: serializer.errors})

    return serializer.validated_data
