# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Django logging configuration.

Everything goes to a single console handler. The pipeline logger (``pseudonymize``)
is configured in ``core.utils.logger`` and propagates to the root handler defined here.
"""

import environ

LOG_LEVEL = environ.Env()('LOG_LEVEL', default='INFO').upper()

# Django internals stay at fixed levels, request noise only on errors
FIXED_LEVELS = {'django': 'INFO', 'django.request': 'ERROR'}

# Application loggers follow LOG_LEVEL
APP_LOGGERS = ('api', 'main')


def _console_logger(level: str) -> dict:
    return {'handlers': ['console'], 'level': level, 'propagate': False}


LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'console': {
            'format': '{asctime} {name} {levelname} {message}',
            'style': '{',
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'console', 'level': LOG_LEVEL},
    },
    'root': {'handlers': ['console'], 'level': LOG_LEVEL},
    'loggers': {
        **{name: _console_logger(level) for name, level in FIXED_LEVELS.items()},
        **{name: _console_logger(LOG_LEVEL) for name in APP_LOGGERS},
    },
}
