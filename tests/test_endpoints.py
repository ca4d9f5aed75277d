"""Tests for document server API endpoints."""

from fastapi.testclient import TestClient

from docserver.main import create_app


def create_folder(client, name, parent_id=None, namespace="mine"):
    response = client.post('/api/folders', json={
        'name': name,
        'parent_id': parent_id,
        'namespace': namespace,
    })
    assert response.status_code == 201, response.text
    return response.json()


def upload(client, filename, content=b'content', folder_id=None, namespace='mine', content_type='text/plain'):
    data = {'namespace': namespace}
    if folder_id is not None:
        data['folder_id'] = str(folder_id)
    return client.post('/api/upload', files={'file': (filename, content, content_type)}, data=data)


class TestHealth:
    def test_root_endpoint(self, api_client):
        response = api_client.get('/')
        assert response.status_code == 200
        assert response.json()['status'] == 'running'

    def test_health(self, api_client):
        assert api_client.get('/health').json()['status'] == 'healthy'

    def test_ready(self, api_client):
        response = api_client.get('/ready')
        assert response.status_code == 200
        assert response.json() == {'ready': True, 'database': 'ok', 'storage': 'ok'}

    def test_request_id_echoed(self, api_client):
        response = api_client.get('/health', headers={'X-Request-ID': 'abc-123'})
        assert response.headers['X-Request-ID'] == 'abc-123'


class TestFolderEndpoints:
    def test_create_and_list_tree(self, api_client):
        docs = create_folder(api_client, 'Docs')
        create_folder(api_client, 'Child', parent_id=docs['id'])

        response = api_client.get('/api/folders/mine')

        assert response.status_code == 200
        folders = response.json()['folders']
        assert [f['name'] for f in folders] == ['Docs']
        assert folders[0]['children'][0]['name'] == 'Child'
        assert folders[0]['children'][0]['children'] == []

    def test_parent_id_null_string_means_root(self, api_client):
        folder = create_folder(api_client, 'Top', parent_id='null')
        assert folder['parent_id'] is None

    def test_missing_name_is_validation_error(self, api_client):
        response = api_client.post('/api/folders', json={'namespace': 'mine'})
        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'

    def test_bad_namespace_is_validation_error(self, api_client):
        response = api_client.get('/api/folders/everyone')
        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'

    def test_unknown_parent_is_not_found(self, api_client):
        response = api_client.post('/api/folders', json={'name': 'X', 'parent_id': 999, 'namespace': 'mine'})
        assert response.status_code == 404
        assert response.json()['code'] == 'FOLDER_NOT_FOUND'

    def test_delete_cascades(self, api_client):
        root = create_folder(api_client, 'root')
        child = create_folder(api_client, 'child', parent_id=root['id'])
        upload(api_client, 'a.txt', folder_id=child['id'])
        upload(api_client, 'c.txt')

        response = api_client.delete(f"/api/folders/{root['id']}")

        assert response.status_code == 200
        assert response.json() == {
            'folder_id': root['id'],
            'deleted_folder_count': 2,
            'deleted_file_count': 1,
        }
        assert api_client.get('/api/folders/mine').json()['folders'] == []
        remaining = api_client.get('/api/files/mine').json()['files']
        assert [f['display_name'] for f in remaining] == ['c.txt']

    def test_delete_unknown_folder_returns_zero_counts(self, api_client):
        response = api_client.delete('/api/folders/98765')
        assert response.status_code == 200
        assert response.json()['deleted_folder_count'] == 0
        assert response.json()['deleted_file_count'] == 0


class TestFileEndpoints:
    def test_upload_and_get_metadata(self, api_client):
        folder = create_folder(api_client, 'Docs')

        response = upload(api_client, 'notes.txt', b'hello', folder_id=folder['id'])

        assert response.status_code == 201
        body = response.json()
        assert body['display_name'] == 'notes.txt'
        assert body['size_bytes'] == 5
        assert body['folder_id'] == folder['id']

        fetched = api_client.get(f"/api/files/item/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json()['stored_name'] == body['stored_name']

    def test_upload_without_file_is_validation_error(self, api_client):
        response = api_client.post('/api/upload', data={'namespace': 'mine'})
        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'

    def test_upload_into_unknown_folder(self, api_client):
        response = upload(api_client, 'a.txt', folder_id=4040)
        assert response.status_code == 404
        assert response.json()['code'] == 'FOLDER_NOT_FOUND'

    def test_upload_too_large(self, api_client):
        response = upload(api_client, 'big.bin', b'x' * 2048)
        assert response.status_code == 413
        assert response.json()['code'] == 'PAYLOAD_TOO_LARGE'

    def test_upload_long_filename(self, api_client):
        name = 'r' * 240 + '.pdf'

        response = upload(api_client, name, b'%PDF', content_type='application/pdf')

        assert response.status_code == 201, response.text
        assert response.json()['display_name'] == name
        assert response.json()['stored_name'].endswith('.pdf')

    def test_list_files_folder_filter(self, api_client):
        folder = create_folder(api_client, 'Docs')
        upload(api_client, 'inside.txt', folder_id=folder['id'])
        upload(api_client, 'outside.txt')

        def names(params):
            response = api_client.get('/api/files/mine', params=params)
            assert response.status_code == 200
            return [f['display_name'] for f in response.json()['files']]

        assert names({}) == ['inside.txt', 'outside.txt']
        assert names({'folder_id': 'root'}) == ['outside.txt']
        assert names({'folder_id': 'null'}) == ['outside.txt']
        assert names({'folder_id': str(folder['id'])}) == ['inside.txt']

    def test_list_files_bad_folder_id(self, api_client):
        response = api_client.get('/api/files/mine', params={'folder_id': 'abc'})
        assert response.status_code == 400

    def test_download(self, api_client):
        file_id = upload(api_client, 'report 1.txt', b'data!').json()['id']

        response = api_client.get(f'/api/download/{file_id}')

        assert response.status_code == 200
        assert response.content == b'data!'
        disposition = response.headers['content-disposition']
        assert disposition.startswith('attachment')
        assert "filename*=UTF-8''report%201.txt" in disposition

    def test_download_unknown_file(self, api_client):
        response = api_client.get('/api/download/1234')
        assert response.status_code == 404
        assert response.json()['code'] == 'FILE_NOT_FOUND'

    def test_preview_inline_text(self, api_client):
        file_id = upload(api_client, 'readme.txt', b'plain text').json()['id']

        response = api_client.get(f'/api/preview/{file_id}')

        assert response.status_code == 200
        assert response.content == b'plain text'
        assert response.headers['content-disposition'].startswith('inline')

    def test_preview_office_placeholder(self, api_client):
        file_id = upload(
            api_client, 'budget.xlsx', b'PK',
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        ).json()['id']

        response = api_client.get(f'/api/preview/{file_id}')

        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/html')
        assert 'budget.xlsx' in response.text
        assert f'/api/download/{file_id}' in response.text

    def test_delete_file(self, api_client):
        file_id = upload(api_client, 'gone.txt').json()['id']

        response = api_client.delete(f'/api/files/{file_id}')
        assert response.json() == {'file_id': file_id, 'deleted': True}

        again = api_client.delete(f'/api/files/{file_id}')
        assert again.json() == {'file_id': file_id, 'deleted': False}
        assert api_client.get(f'/api/files/item/{file_id}').status_code == 404

    def test_search(self, api_client):
        upload(api_client, 'Quarterly Report.pdf', content_type='application/pdf')
        upload(api_client, 'report-shared.pdf', namespace='shared', content_type='application/pdf')

        response = api_client.get('/api/search', params={'query': 'REPORT', 'namespace': 'mine'})

        assert response.status_code == 200
        body = response.json()
        assert body['query'] == 'REPORT'
        assert [f['display_name'] for f in body['files']] == ['Quarterly Report.pdf']

    def test_search_without_query(self, api_client):
        response = api_client.get('/api/search', params={'namespace': 'mine'})
        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'


def test_startup_seeds_default_folders(tmp_path):
    app = create_app(
        database_path=str(tmp_path / 'seeded.db'),
        uploads_dir=str(tmp_path / 'seeded-uploads'),
        seed_defaults=True,
    )
    with TestClient(app) as client:
        mine = client.get('/api/folders/mine').json()['folders']
        shared = client.get('/api/folders/shared').json()['folders']

    assert len(mine) == 5
    assert len(shared) == 2


def test_openapi_documents_error_shape(api_client):
    schema = api_client.get('/openapi.json').json()

    assert 'ErrorResponse' in schema['components']['schemas']
    delete_responses = schema['paths']['/api/folders/{folder_id}']['delete']['responses']
    assert '500' in delete_responses
