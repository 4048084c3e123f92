# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""API root view with the UI titles and documentation links."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework.views import APIView

from api.schemas import API_ROOT_SCHEMA

if TYPE_CHECKING:
    from rest_framework.request import Request

SETTING_TITLES = ['Txt & Log', 'JSON', 'XML', 'Regex Suchmuster']


class ApiTags:
    """API tag constants for Swagger/OpenAPI documentation grouping."""

    API = 'API'
    SESSION = 'Session'


@extend_schema(tags=[ApiTags.API])
@API_ROOT_SCHEMA
class APIRootView(APIView):
    """Custom API root view that includes the setting titles and documentation links."""

    def get(self, request: Request, format_suffix: str | None = None) -> Response:
        """Return the UI titles and links to all available endpoints."""
        links = {
            'upload': reverse('upload', request=request, format=format_suffix),
            'pseudo': reverse('pseudo', request=request, format=format_suffix),
            'download': reverse('download', request=request, format=format_suffix),
            'session': reverse('session', request=request, format=format_suffix),
        }
        if settings.DEBUG:
            links['docs'] = reverse('swagger-ui', request=request, format=format_suffix)
            links['schema'] = reverse('schema', request=request, format=format_suffix)

        return Response({'title': 'PALoSA', 'settingTitles': SETTING_TITLES, 'links': links})
