# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Core package.

This package provides the pseudonymization pipeline for uploaded log, JSON and XML files.
The main modules include the pseudonym generators, config merging, document traversal,
regex based content replacement and the per-session process manager.
"""
