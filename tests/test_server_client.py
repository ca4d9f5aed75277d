"""Unit tests for ServerClient."""

import json

import httpx
import pytest

from cli import server_client
from cli.server_client import ServerClient

FILE_META = {
    'id': 7,
    'display_name': 'report.pdf',
    'stored_name': '1700000000000-42-report.pdf',
    'size_bytes': 2048,
    'content_type': 'application/pdf',
    'folder_id': 3,
    'folder_name': 'Reports',
    'namespace': 'mine',
    'created_at': '2024-01-01T00:00:00.000000+00:00',
}


@pytest.fixture
def mock_transport_success():
    """Mock transport that returns successful responses."""
    def handler(request):
        path, method = request.url.path, request.method

        if path == '/api/folders/mine' and method == 'GET':
            return httpx.Response(200, json={'namespace': 'mine', 'folders': [
                {'id': 1, 'name': 'Docs', 'parent_id': None, 'namespace': 'mine',
                 'created_at': 'x', 'children': [
                     {'id': 2, 'name': 'Inner', 'parent_id': 1, 'namespace': 'mine',
                      'created_at': 'x', 'children': []},
                 ]},
                {'id': 3, 'name': 'Reports', 'parent_id': None, 'namespace': 'mine',
                 'created_at': 'x', 'children': []},
            ]})
        elif path == '/api/folders/shared' and method == 'GET':
            return httpx.Response(200, json={'namespace': 'shared', 'folders': []})
        elif path == '/api/folders' and method == 'POST':
            body = json.loads(request.content)
            return httpx.Response(201, json={
                'id': 11, 'name': body['name'], 'parent_id': body['parent_id'],
                'namespace': body['namespace'], 'created_at': 'x',
            })
        elif path == '/api/folders/1' and method == 'DELETE':
            return httpx.Response(200, json={'folder_id': 1, 'deleted_folder_count': 2, 'deleted_file_count': 5})
        elif path == '/api/folders/404' and method == 'DELETE':
            return httpx.Response(200, json={'folder_id': 404, 'deleted_folder_count': 0, 'deleted_file_count': 0})
        elif path == '/api/files/mine' and method == 'GET':
            return httpx.Response(200, json={'files': [FILE_META]})
        elif path == '/api/upload' and method == 'POST':
            request.read()
            assert b'name="namespace"' in request.content
            return httpx.Response(201, json=dict(FILE_META, display_name='test.txt', size_bytes=26))
        elif path == '/api/download/7' and method == 'GET':
            return httpx.Response(
                200,
                content=b'%PDF-1.4 body',
                headers={'Content-Disposition': "attachment; filename=\"report.pdf\"; filename*=UTF-8''report.pdf"},
            )
        elif path == '/api/files/7' and method == 'DELETE':
            return httpx.Response(200, json={'file_id': 7, 'deleted': True})
        elif path == '/api/search' and method == 'GET':
            if request.url.params['query'] == 'nothing':
                return httpx.Response(200, json={'query': 'nothing', 'files': []})
            return httpx.Response(200, json={'query': request.url.params['query'], 'files': [FILE_META]})

        return httpx.Response(404, json={'detail': 'Not Found', 'code': 'NOT_FOUND'})

    return httpx.MockTransport(handler)


@pytest.fixture
def client_with_mock(temp_config, mock_transport_success):
    """Create ServerClient with mocked HTTP transport."""
    client = ServerClient(temp_config)
    client.session = httpx.Client(transport=mock_transport_success, base_url='http://test')
    return client


def client_returning(temp_config, response):
    client = ServerClient(temp_config)
    client.session = httpx.Client(transport=httpx.MockTransport(lambda request: response), base_url='http://test')
    return client


def test_list_folders_renders_tree(client_with_mock):
    result = client_with_mock.list_folders('mine')

    assert "Folders in 'mine'" in result
    assert '├── Docs [1]' in result
    assert '│   └── Inner [2]' in result
    assert '└── Reports [3]' in result


def test_list_folders_empty(client_with_mock):
    assert client_with_mock.list_folders('shared') == "No folders in 'shared'."


def test_create_folder(client_with_mock):
    result = client_with_mock.create_folder('mine', 'Notes', 1)

    assert result == 'Created folder: Notes (ID: 11)'


def test_delete_folder_reports_counts(client_with_mock):
    assert client_with_mock.delete_folder(1) == 'Deleted 2 folder(s) and 5 file(s).'


def test_delete_unknown_folder(client_with_mock):
    assert 'Nothing deleted' in client_with_mock.delete_folder(404)


def test_list_files(client_with_mock):
    result = client_with_mock.list_files('mine', 'root')

    assert 'Found 1 file(s)' in result
    assert 'report.pdf (ID: 7)' in result
    assert 'Location: Reports' in result


def test_upload_success(client_with_mock, sample_file):
    result = client_with_mock.upload('mine', str(sample_file), 3)

    assert 'Uploaded: test.txt' in result
    assert 'ID: 7' in result


def test_upload_missing_local_file(client_with_mock):
    assert 'File not found' in client_with_mock.upload('mine', '/nonexistent/file.txt')


def test_download_writes_file(client_with_mock, tmp_path):
    result = client_with_mock.download(7, str(tmp_path))

    assert 'Downloaded: report.pdf' in result
    assert (tmp_path / 'report.pdf').read_bytes() == b'%PDF-1.4 body'


def test_download_not_found(temp_config):
    client = client_returning(
        temp_config, httpx.Response(404, json={'detail': 'File 9 not found', 'code': 'FILE_NOT_FOUND'})
    )

    assert client.download(9) == 'Error: File not found on server.'


def test_delete_file(client_with_mock):
    assert client_with_mock.delete_file(7) == 'Deleted file 7.'


def test_search(client_with_mock):
    result = client_with_mock.search('mine', 'report')

    assert "matching 'report'" in result
    assert 'report.pdf' in result


def test_search_no_results(client_with_mock):
    assert client_with_mock.search('mine', 'nothing') == "No files matching 'nothing'."


def test_validation_error_message(temp_config):
    client = client_returning(
        temp_config, httpx.Response(400, json={'detail': 'Folder name is required', 'code': 'VALIDATION_ERROR'})
    )

    assert client.create_folder('mine', ' ') == 'Error: Invalid request: Folder name is required'


def test_retries_on_server_error(temp_config, monkeypatch):
    """5xx responses are retried with backoff before the error is reported."""
    monkeypatch.setattr(server_client.time, 'sleep', lambda seconds: None)
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, json={'detail': 'db down', 'code': 'BACKEND_ERROR'})

    client = ServerClient(temp_config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')

    result = client.delete_file(1)

    assert len(calls) == temp_config.get_retry_config()['max_retries'] + 1
    assert 'Nothing was changed' in result


def test_connection_error_message(temp_config, monkeypatch):
    monkeypatch.setattr(server_client.time, 'sleep', lambda seconds: None)

    def handler(request):
        raise httpx.ConnectError('refused', request=request)

    client = ServerClient(temp_config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')

    assert 'Cannot connect to document server' in client.list_folders('mine')


def test_request_id_header_sent(temp_config):
    seen = {}

    def handler(request):
        seen['request_id'] = request.headers.get('X-Request-ID')
        return httpx.Response(200, json={'namespace': 'mine', 'folders': []})

    client = ServerClient(temp_config)
    client.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    client.list_folders('mine')

    assert seen['request_id'] == client.request_id
