# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Main package for the Django project.

This package contains the settings, logging configuration and URL routing of the
PALoSA web application. Requests run the pseudonymization pipeline synchronously.
"""
