# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""URL configuration for the API (Django Rest Framework)."""

from django.conf import settings
from django.urls import path

from api.views import APIRootView, DownloadView, PseudonymizeView, SessionView, UploadView

urlpatterns = [
    path('', APIRootView.as_view(), name='api-root'),
    path('upload', UploadView.as_view(), name='upload'),
    path('pseudo', PseudonymizeView.as_view(), name='pseudo'),
    path('download', DownloadView.as_view(), name='download'),
    path('session', SessionView.as_view(), name='session'),
]

if settings.DEBUG:
    from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

    urlpatterns += [
        path('docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
        path('schema/', SpectacularAPIView.as_view(), name='schema'),
    ]
