# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Views for uploading, pseudonymizing, downloading and cleaning up a session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.http import FileResponse
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import MultiPartParser
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework.views import APIView

from api.schemas import DOWNLOAD_SCHEMA, PSEUDONYMIZE_SCHEMA, SESSION_DELETE_SCHEMA, UPLOAD_SCHEMA
from api.serializers import SettingsSerializer
from api.utils.file_handling import get_pipeline, get_session_id, get_session_paths, store_uploaded_file
from api.utils.validators import upload_category, validate_config_definition, validate_file_name
from api.views.root import ApiTags
from core.config_merger import merge_config_definition
from core.exceptions import PatternCompileError, PseudonymizationError
from core.processor import run_pipeline
from core.utils.logger import setup_logging
from core.utils.session_dirs import create_upload_dirs, remove_session

if TYPE_CHECKING:
    from rest_framework.request import Request

logger = setup_logging()


@extend_schema(tags=[ApiTags.SESSION])
@UPLOAD_SCHEMA
class UploadView(APIView):
    """Store uploaded files in the upload folder selected by ``buttonType``."""

    parser_classes = (MultiPartParser,)

    def post(self, request: Request) -> Response:
        """Store the files, merging config definitions for json and xml uploads."""
        category = upload_category(request.query_params.get('buttonType'))
        uploaded_files = request.FILES.getlist('files')

        if not uploaded_files:
            return Response({'error': 'No files uploaded'}, status=status.HTTP_400_BAD_REQUEST)

        # validate everything before the first file is written
        if category == 'other':
            uploads = [(uploaded, validate_file_name(uploaded), None) for uploaded in uploaded_files]
        else:
            uploads = [
                (uploaded, validate_file_name(uploaded), validate_config_definition(uploaded))
                for uploaded in uploaded_files
            ]

        paths = get_session_paths(request)
        create_upload_dirs(paths)
        target_dir = paths.upload_category_dir(category)

        for uploaded, file_name, definition in uploads:
            store_uploaded_file(uploaded, target_dir, file_name)

            if definition is not None:
                merge_config_definition(paths, definition, category)

        logger.info('Stored %d %s upload(s) for session "%s"', len(uploads), category, paths.session_id)

        return Response(
            {'success': True, 'buttonType': category, 'files': [file_name for _, file_name, _ in uploads]},
            status=status.HTTP_200_OK,
        )


@extend_schema(tags=[ApiTags.SESSION])
@PSEUDONYMIZE_SCHEMA
class PseudonymizeView(APIView):
    """Run the pseudonymization pipeline for the uploads of the session."""

    def post(self, request: Request) -> Response:
        """Validate the settings and run the pipeline."""
        serializer = SettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        config, pseudonymizer = get_pipeline()
        session_id = get_session_id(request)

        try:
            run_pipeline(session_id, serializer.validated_data, config, pseudonymizer=pseudonymizer)

        except PatternCompileError as error:
            return Response(
                {'error': 'Invalid pattern', 'pattern': error.pattern, 'details': str(error.reason)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        except (PseudonymizationError, OSError):
            # details are logged by the pipeline
            return Response({'error': 'Processing failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {'success': True, 'download_url': reverse('download', request=request)},
            status=status.HTTP_200_OK,
        )


@extend_schema(tags=[ApiTags.SESSION])
@DOWNLOAD_SCHEMA
class DownloadView(APIView):
    """Download the ZIP archive of the last pipeline run."""

    def get(self, request: Request) -> Response | FileResponse:
        """Stream the archive, 404 when the session has none."""
        paths = get_session_paths(request, create=False)

        if paths is None or not paths.archive_path.is_file():
            return Response({'error': 'No pseudonymized files available'}, status=status.HTTP_404_NOT_FOUND)

        return FileResponse(
            paths.archive_path.open('rb'),
            as_attachment=True,
            filename=paths.archive_path.name,
            content_type='application/zip',
        )


@extend_schema(tags=[ApiTags.SESSION])
@SESSION_DELETE_SCHEMA
class SessionView(APIView):
    """Remove all files of the session and end it."""

    def delete(self, request: Request) -> Response:
        """Delete the session folders and flush the session."""
        session_id = get_session_id(request, create=False)

        if session_id is not None:
            config, _ = get_pipeline()
            remove_session(config, session_id)

        request.session.flush()
        return Response(status=status.HTTP_204_NO_CONTENT)
