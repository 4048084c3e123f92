# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""API app for the Django project."""

from __future__ import annotations

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class ApiConfig(AppConfig):
    """Base configuration for the current app, holding the pipeline configuration."""

    name = 'api'

    def ready(self) -> None:
        """Build the pipeline configuration and pseudonymizer once per process."""
        from core.exceptions import MissingSecretKeyError
        from core.pseudonymizer import Pseudonymizer
        from core.utils.config import PipelineConfig

        try:
            self.pipeline_config = PipelineConfig.for_data_root(
                secret_key=settings.PSEUDO_KEY,
                data_root=settings.PSEUDO_DATA_ROOT,
                pseudonym_length=settings.PSEUDONYM_LENGTH,
                session_ttl=settings.SESSION_TTL,
            )
        except (MissingSecretKeyError, ValueError) as error:
            raise ImproperlyConfigured(str(error)) from error

        self.pseudonymizer = Pseudonymizer.from_config(self.pipeline_config)
