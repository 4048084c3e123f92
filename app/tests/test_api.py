# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Tests for the session endpoints of the pseudonymization API."""

from __future__ import annotations

import io
import json
import zipfile
from typing import TYPE_CHECKING

import pytest
from django.apps import apps
from django.core.files.uploadedfile import SimpleUploadedFile

from api.serializers import validate_config
from core.utils.config import PipelineConfig
from core.utils.session_dirs import SessionPaths

if TYPE_CHECKING:
    from pathlib import Path

    from django.test import Client

DEFINITION = {
    'sources': ['ipField', 'mailField'],
    'derived': {'mergedField': {'sources': ['nested.a', 'nested.b'], 'separator': '-'}},
}
DOCUMENT = {'ipField': '192.168.1.1', 'mailField': 'user@example.com', 'nested': {'a': 'foo', 'b': 'bar'}}


# ----------------------------------- FIXTURES ------------------------------------ #


@pytest.fixture
def pipeline_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PipelineConfig:
    """Point the api app at a temporary data root."""
    config = PipelineConfig.for_data_root('test-pseudo-key', tmp_path)
    monkeypatch.setattr(apps.get_app_config('api'), 'pipeline_config', config)
    return config


def json_file(name: str, content: object) -> SimpleUploadedFile:
    """Uploaded file holding JSON content."""
    return SimpleUploadedFile(name, json.dumps(content).encode(), content_type='application/json')


def session_paths(client: Client, config: PipelineConfig) -> SessionPaths:
    """Folders of the session the test client is in."""
    return SessionPaths.for_session(config, client.cookies['sessionid'].value)


def download(client: Client) -> dict[str, bytes]:
    """Download the archive of the session and read its members."""
    response = client.get('/api/download')
    assert response.status_code == 200

    data = b''.join(response.streaming_content)
    response.close()

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


# -------------------------------- API ROOT TESTS --------------------------------- #


class TestApiRoot:
    """Tests for the API root."""

    def test_root(self, client: Client) -> None:
        """The root lists the UI titles and the session endpoints."""
        response = client.get('/api/')
        body = response.json()

        assert response.status_code == 200
        assert body['title'] == 'PALoSA'
        assert body['settingTitles'] == ['Txt & Log', 'JSON', 'XML', 'Regex Suchmuster']
        assert set(body['links']) == {'upload', 'pseudo', 'download', 'session'}

    def test_redirect(self, client: Client) -> None:
        """The site root redirects to the API root."""
        response = client.get('/')

        assert response.status_code == 301
        assert response['Location'] == '/api/'


# --------------------------------- UPLOAD TESTS ---------------------------------- #


class TestUpload:
    """Tests for uploading files."""

    def test_other_files(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Files are stored in the folder of their button type."""
        response = client.post(
            '/api/upload?buttonType=other',
            {'files': [SimpleUploadedFile('app.log', b'login 10.0.0.1\n'), json_file('data.json', DOCUMENT)]},
        )

        paths = session_paths(client, pipeline_config)
        assert response.status_code == 200
        assert response.json() == {'success': True, 'buttonType': 'other', 'files': ['app.log', 'data.json']}
        assert (paths.upload_category_dir('other') / 'app.log').read_bytes() == b'login 10.0.0.1\n'

    def test_unknown_button_type(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Unknown button types store into the other folder."""
        response = client.post('/api/upload?buttonType=csv', {'files': [SimpleUploadedFile('a.txt', b'a')]})

        assert response.json()['buttonType'] == 'other'
        assert (session_paths(client, pipeline_config).upload_category_dir('other') / 'a.txt').exists()

    def test_config_definition_merged(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """JSON config definitions are stored and merged into the type config."""
        response = client.post('/api/upload?buttonType=json', {'files': [json_file('fields.json', DEFINITION)]})

        paths = session_paths(client, pipeline_config)
        config = json.loads(paths.config_file('json').read_text(encoding='utf-8'))
        assert response.status_code == 200
        assert (paths.upload_category_dir('json') / 'fields.json').exists()
        assert config == DEFINITION

    @pytest.mark.parametrize(
        'definition',
        [
            {'sources': 'ipField', 'derived': {}},
            {'sources': [1], 'derived': {}},
            {'sources': [], 'derived': {'x': {'sources': ['a'], 'separator': 1}}},
            {'sources': [], 'derived': {}, 'extra': True},
        ],
    )
    def test_invalid_definition_rejected(
        self,
        client: Client,
        pipeline_config: PipelineConfig,
        definition: dict,
    ) -> None:
        """Definitions that do not match the schema are rejected before storing."""
        response = client.post('/api/upload?buttonType=xml', {'files': [json_file('fields.json', definition)]})

        assert response.status_code == 400
        assert not pipeline_config.upload_root.exists()

    def test_reserved_name_rejected(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Uploads may not overwrite the generated config."""
        response = client.post('/api/upload?buttonType=json', {'files': [json_file('json-config.json', DEFINITION)]})

        assert response.status_code == 400

    def test_invalid_json_rejected(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Definitions must be JSON."""
        response = client.post(
            '/api/upload?buttonType=json',
            {'files': [SimpleUploadedFile('fields.json', b'{"sources": ')]},
        )

        assert response.status_code == 400

    def test_no_files(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """An upload without files is a bad request."""
        response = client.post('/api/upload?buttonType=other', {})

        assert response.status_code == 400
        assert response.json() == {'error': 'No files uploaded'}


# ------------------------------ PSEUDONYMIZE TESTS ------------------------------- #


class TestPseudonymize:
    """Tests for running the pipeline and downloading the result."""

    def test_end_to_end(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Upload, pseudonymize and download a JSON document."""
        client.post('/api/upload?buttonType=json', {'files': [json_file('fields.json', DEFINITION)]})
        client.post('/api/upload?buttonType=other', {'files': [json_file('test.json', DOCUMENT)]})

        response = client.post('/api/pseudo', {}, content_type='application/json')
        contents = download(client)
        document = json.loads(contents['test-pseudo.json'])

        assert response.status_code == 200
        assert response.json()['success'] is True
        assert response.json()['download_url'].endswith('/api/download')
        assert document['mergedField'] == 'foo-bar'
        assert b'192.168.1.1' not in contents['test-pseudo.json']
        assert b'user@example.com' not in contents['test-pseudo.json']

    def test_log_settings(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Checked built-in patterns are applied to log files."""
        client.post('/api/upload?buttonType=other', {'files': [SimpleUploadedFile('app.log', b'from 10.0.0.1\n')]})

        settings = {'logSettings': {'checkedOptions': ['IP-Adressen']}, 'regexSettings': {'patterns': []}}
        response = client.post('/api/pseudo', settings, content_type='application/json')

        assert response.status_code == 200
        assert b'10.0.0.1' not in download(client)['app-pseudo.log']

    def test_invalid_pattern(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """An invalid pattern is reported with the pattern."""
        client.post('/api/upload?buttonType=other', {'files': [SimpleUploadedFile('app.log', b'text\n')]})

        settings = {'regexSettings': {'patterns': ['(unclosed']}}
        response = client.post('/api/pseudo', settings, content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid pattern'
        assert response.json()['pattern'] == '(unclosed'

    def test_processing_failed(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Files that cannot be processed give a server error."""
        client.post('/api/upload?buttonType=other', {'files': [SimpleUploadedFile('broken.json', b'{"a": ')]})

        response = client.post('/api/pseudo', {}, content_type='application/json')

        assert response.status_code == 500
        assert response.json() == {'error': 'Processing failed'}

    @pytest.mark.parametrize(
        'settings',
        [
            {'logSettings': {'checkedOptions': 'E-Mail'}},
            {'regexSettings': {'patterns': [1]}},
        ],
    )
    def test_invalid_settings(self, client: Client, pipeline_config: PipelineConfig, settings: dict) -> None:
        """Settings that do not match their shape are rejected."""
        response = client.post('/api/pseudo', settings, content_type='application/json')

        assert response.status_code == 400

    def test_download_without_archive(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Downloading before a run finds nothing."""
        response = client.get('/api/download')

        assert response.status_code == 404


# --------------------------------- SESSION TESTS --------------------------------- #


class TestSession:
    """Tests for ending a session."""

    def test_delete_removes_folders(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Deleting the session removes all of its folders."""
        client.post('/api/upload?buttonType=other', {'files': [SimpleUploadedFile('app.log', b'text\n')]})
        client.post('/api/pseudo', {}, content_type='application/json')
        paths = session_paths(client, pipeline_config)

        response = client.delete('/api/session')

        assert response.status_code == 204
        assert not any(folder.exists() for folder in paths.all_dirs)
        assert client.get('/api/download').status_code == 404

    def test_delete_without_session(self, client: Client, pipeline_config: PipelineConfig) -> None:
        """Deleting without a session is not an error."""
        assert client.delete('/api/session').status_code == 204


class TestValidateConfig:
    """Tests for the config definition check."""

    @pytest.mark.parametrize(
        ('data', 'expected'),
        [
            (DEFINITION, True),
            ({'sources': [], 'derived': {}}, True),
            ({'sources': []}, False),
            ({'sources': ['a'], 'derived': {'x': {'sources': ['a']}}}, False),
            ({'sources': ['a'], 'derived': {'x': {'sources': 'a', 'separator': ''}}}, False),
            (['a'], False),
        ],
    )
    def test_validate_config(self, data: object, expected: bool) -> None:  # noqa: FBT001
        """Only definitions with string sources and complete derived fields are valid."""
        assert validate_config(data) is expected
