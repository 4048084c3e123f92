# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""OpenAPI schema definitions for the API views."""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers

from api.serializers import SettingsSerializer


class APIRootResponseSerializer(serializers.Serializer):
    """Response serializer for API root view."""

    title = serializers.CharField(default='PALoSA')
    settingTitles = serializers.ListField(child=serializers.CharField())  # noqa: N815
    links = serializers.DictField(child=serializers.URLField(), help_text='URLs of the session endpoints')


class UploadResponseSerializer(serializers.Serializer):
    """Response serializer for stored uploads."""

    success = serializers.BooleanField(default=True)
    buttonType = serializers.CharField()  # noqa: N815
    files = serializers.ListField(child=serializers.CharField())


class PseudonymizeResponseSerializer(serializers.Serializer):
    """Response serializer for a finished pipeline run."""

    success = serializers.BooleanField(default=True)
    download_url = serializers.URLField()


class ErrorResponseSerializer(serializers.Serializer):
    """Response serializer for failed requests."""

    error = serializers.CharField()
    details = serializers.CharField(required=False)


class PatternErrorResponseSerializer(serializers.Serializer):
    """Response serializer for a user pattern that does not compile."""

    error = serializers.CharField(default='Invalid pattern')
    pattern = serializers.CharField()
    details = serializers.CharField()


# Schema definitions for endpoints
API_ROOT_SCHEMA = extend_schema(
    responses={
        200: APIRootResponseSerializer,
    },
)

UPLOAD_SCHEMA = extend_schema(
    parameters=[
        OpenApiParameter(
            name='buttonType',
            type=OpenApiTypes.STR,
            enum=['json', 'xml', 'other'],
            description='upload folder, json and xml expect config definition files',
        ),
    ],
    request={
        'multipart/form-data': {
            'type': 'object',
            'properties': {'files': {'type': 'array', 'items': {'type': 'string', 'format': 'binary'}}},
        },
    },
    responses={
        200: UploadResponseSerializer,
        400: ErrorResponseSerializer,
    },
)

PSEUDONYMIZE_SCHEMA = extend_schema(
    request=SettingsSerializer,
    responses={
        200: PseudonymizeResponseSerializer,
        400: PatternErrorResponseSerializer,
        500: ErrorResponseSerializer,
    },
)

DOWNLOAD_SCHEMA = extend_schema(
    responses={
        (200, 'application/zip'): OpenApiTypes.BINARY,
        404: ErrorResponseSerializer,
    },
)

SESSION_DELETE_SCHEMA = extend_schema(
    responses={
        204: None,
    },
)
