# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Pseudonymization pipeline for the uploaded files of a session.

This pipeline provides functionality for:
    - Merging the selected fields and patterns into the per-type configs
    - Copying the raw uploads into the output folder
    - Pseudonymizing log/text, JSON and XML files
    - Archiving the output folder into a downloadable ZIP
"""

from __future__ import annotations

import time
from enum import Enum
from typing import TYPE_CHECKING, Any

from core.config_merger import merge_config
from core.file_processors import process_json_files, process_log_files, process_xml_files
from core.pseudonymizer import Pseudonymizer
from core.regex_anonymizer import RegexAnonymizer
from core.utils.file_handling import copy_files_to_output, create_zipfile
from core.utils.logger import setup_logging
from core.utils.progress_tracker import performance_metrics
from core.utils.session_dirs import SessionPaths

if TYPE_CHECKING:
    from pathlib import Path

    from core.utils.config import PipelineConfig
    from core.utils.progress_tracker import ProgressTracker

logger = setup_logging()


class PipelineState(Enum):
    """Stages of a pipeline run, in execution order."""

    INIT = 'Init'
    DIRS_CREATED = 'DirsCreated'
    SETTINGS_MERGED = 'SettingsMerged'
    FILES_COPIED = 'FilesCopied'
    LOGS_PROCESSED = 'LogsProcessed'
    JSON_PROCESSED = 'JsonProcessed'
    XML_PROCESSED = 'XmlProcessed'
    ARCHIVED = 'Archived'
    DONE = 'Done'
    FAILED = 'Failed'


STATE_PROGRESS = {
    PipelineState.INIT: 0,
    PipelineState.DIRS_CREATED: 5,
    PipelineState.SETTINGS_MERGED: 10,
    PipelineState.FILES_COPIED: 20,
    PipelineState.LOGS_PROCESSED: 45,
    PipelineState.JSON_PROCESSED: 70,
    PipelineState.XML_PROCESSED: 90,
    PipelineState.ARCHIVED: 98,
    PipelineState.DONE: 100,
}


class ProcessManager:
    """Run the pipeline steps of one session strictly in order.

    A failing step marks the run as failed and re-raises; files written by
    earlier steps stay in the output folder.
    """

    def __init__(
        self,
        config: PipelineConfig,
        session_id: str,
        settings: dict[str, Any],
        pseudonymizer: Pseudonymizer | None = None,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self.paths = SessionPaths.for_session(config, session_id)
        self.settings = settings
        self.pseudonymizer = pseudonymizer or Pseudonymizer.from_config(config)
        self.anonymizer = RegexAnonymizer(self.pseudonymizer)
        self.tracker = tracker
        self.state = PipelineState.INIT
        self.json_config: dict[str, Any] = {}
        self.xml_config: dict[str, Any] = {}
        self.processed_files: list[Path] = []

    def _advance(self, state: PipelineState) -> None:
        self.state = state
        logger.debug('Session "%s" reached state %s', self.paths.session_id, state.value)

        if self.tracker is not None:
            self.tracker.update_progress(state.value, STATE_PROGRESS[state])

    # ------------------------------------ PIPELINE STEPS ------------------------------------ #

    def create_dirs(self) -> None:
        """Create the output and download folders of the session."""
        self.paths.output_dir.mkdir(parents=True, exist_ok=True)
        self.paths.download_dir.mkdir(parents=True, exist_ok=True)
        self._advance(PipelineState.DIRS_CREATED)

    def merge_settings(self) -> None:
        """Merge the settings into the JSON and XML configs."""
        self.json_config = merge_config(self.paths, self.settings, 'json')
        self.xml_config = merge_config(self.paths, self.settings, 'xml')
        self._advance(PipelineState.SETTINGS_MERGED)

    def copy_files(self) -> None:
        """Copy the raw uploads into the output folder under their pseudo names."""
        copied = copy_files_to_output(self.paths.upload_category_dir('other'), self.paths.output_dir)
        logger.info('Copied %d file(s) for session "%s"', len(copied), self.paths.session_id)
        self._advance(PipelineState.FILES_COPIED)

    def process_logs(self) -> None:
        """Pseudonymize the log/text files."""
        self.processed_files += process_log_files(self.paths.output_dir, self.settings, self.anonymizer)
        self._advance(PipelineState.LOGS_PROCESSED)

    def process_json(self) -> None:
        """Pseudonymize the JSON files."""
        output_dir = self.paths.output_dir
        self.processed_files += process_json_files(output_dir, self.settings, self.json_config, self.anonymizer)
        self._advance(PipelineState.JSON_PROCESSED)

    def process_xml(self) -> None:
        """Pseudonymize the XML files."""
        output_dir = self.paths.output_dir
        self.processed_files += process_xml_files(output_dir, self.settings, self.xml_config, self.anonymizer)
        self._advance(PipelineState.XML_PROCESSED)

    def archive(self) -> None:
        """Zip the output folder into the download folder."""
        create_zipfile(self.paths.output_dir, self.paths.archive_path)
        self._advance(PipelineState.ARCHIVED)

    # ---------------------------------------------------------------------------------------- #

    def run(self) -> Path:
        """Run all steps and return the path of the ZIP archive."""
        start_time = time.time()
        logger.info('Starting pipeline for session "%s"', self.paths.session_id)

        steps = (
            self.create_dirs,
            self.merge_settings,
            self.copy_files,
            self.process_logs,
            self.process_json,
            self.process_xml,
            self.archive,
        )

        try:
            for step in steps:
                step()
        except Exception as error:
            failed_in = self.state
            self.state = PipelineState.FAILED
            logger.exception(
                'Pipeline for session "%s" failed after state %s (%s): %s',
                self.paths.session_id,
                failed_in.value,
                type(error).__name__,
                error,
            )
            raise

        self._advance(PipelineState.DONE)
        performance_metrics(start_time, len(self.processed_files))

        return self.paths.archive_path


def run_pipeline(
    session_id: str,
    settings: dict[str, Any],
    config: PipelineConfig,
    pseudonymizer: Pseudonymizer | None = None,
    tracker: ProgressTracker | None = None,
) -> Path:
    """Pseudonymize the uploads of a session and return the path of the ZIP archive.

    Raises:
        InvalidSessionError: the session id cannot be used as a directory name
        UnknownConfigTypeError, ConfigReadError: the per-type config cannot be merged
        PatternCompileError: a user pattern is not a valid regex
        ContentTransformError: a file could not be pseudonymized

    """
    manager = ProcessManager(config, session_id, settings, pseudonymizer=pseudonymizer, tracker=tracker)
    return manager.run()
