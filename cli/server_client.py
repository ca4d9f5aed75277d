"""HTTP client for communicating with the document server."""

import os
import sys
import time
import uuid
from pathlib import Path
from typing import Optional

import httpx

from common.formatting import format_file_size
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RESET
from cli.utils import ProgressFileWrapper, filename_from_disposition, render_folder_tree

logger = get_logger(__name__)


class ServerClient:
    """HTTP client for the document server API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize server client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized ServerClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        base_timeout = 30.0
        size_mb = file_size / (1024 * 1024)
        return base_timeout + size_mb * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        last_exception = None

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})
        kwargs['headers']['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if 400 <= response.status_code < 500:
                    logger.warning(
                        f"Client error: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                    )
                    return response

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s [request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error (max retries exceeded): {method} {endpoint} error={e} [request_id={self.request_id}]"
                )

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        raise ConnectionError("Cannot connect to document server. Is it running?")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            detail = response.text if response.text else 'Unknown error'
            code = 'UNKNOWN'

        if code == 'VALIDATION_ERROR':
            return f"Invalid request: {detail}"

        error_messages = {
            'FOLDER_NOT_FOUND': 'Folder not found in the current namespace.',
            'FILE_NOT_FOUND': 'File not found on server.',
            'PAYLOAD_TOO_LARGE': 'File is larger than the server accepts.',
            'STORAGE_IO_ERROR': 'The server could not read or write the stored file.',
            'BACKEND_ERROR': 'The server database failed. Nothing was changed.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            400: 'Bad request',
            404: 'Not found',
            413: 'File too large',
            422: 'Malformed request',
            500: 'Server error',
            503: 'Service unavailable',
        }

        message = status_messages.get(response.status_code, detail)
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def list_folders(self, namespace: str) -> str:
        """
        Show the folder tree of a namespace.

        Returns:
            Rendered tree, or a message when there are no folders
        """
        try:
            response = self._request_with_retry('GET', f'/api/folders/{namespace}')

            if response.status_code == 200:
                folders = response.json()['folders']
                if not folders:
                    return f"No folders in '{namespace}'."
                return f"Folders in '{namespace}':\n{render_folder_tree(folders)}"
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error listing folders: {e}", exc_info=True)
            return f"Unexpected error listing folders: {e}"

    def list_files(self, namespace: str, folder: Optional[str] = None) -> str:
        """
        List files of a namespace.

        Args:
            namespace: Active namespace
            folder: None for every file, "root" for root files, or a folder id

        Returns:
            Formatted list of files
        """
        params = {}
        if folder is not None:
            params['folder_id'] = folder

        try:
            response = self._request_with_retry('GET', f'/api/files/{namespace}', params=params)

            if response.status_code == 200:
                files = response.json()['files']
                if not files:
                    return "No files found."

                output = [f"Found {len(files)} file(s):\n"]
                for file_meta in files:
                    output.append(self._describe_file(file_meta))
                return '\n'.join(output)
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error listing files: {e}", exc_info=True)
            return f"Unexpected error listing files: {e}"

    def _describe_file(self, file_meta: dict) -> str:
        location = file_meta.get('folder_name') or (
            f"folder {file_meta['folder_id']}" if file_meta.get('folder_id') else "root"
        )
        return (
            f"  - {file_meta['display_name']} (ID: {file_meta['id']})\n"
            f"    Size: {format_file_size(file_meta['size_bytes'])}\n"
            f"    Location: {location}\n"
            f"    Created: {file_meta['created_at']}"
        )

    def create_folder(self, namespace: str, name: str, parent_id: Optional[int] = None) -> str:
        try:
            response = self._request_with_retry(
                'POST',
                '/api/folders',
                json={'name': name, 'parent_id': parent_id, 'namespace': namespace}
            )

            if response.status_code == 201:
                folder = response.json()
                return f"Created folder: {folder['name']} (ID: {folder['id']})"
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error creating folder: {e}", exc_info=True)
            return f"Unexpected error creating folder: {e}"

    def delete_folder(self, folder_id: int) -> str:
        """
        Delete a folder and everything inside it.

        Returns:
            Result with deleted folder and file counts
        """
        try:
            response = self._request_with_retry('DELETE', f'/api/folders/{folder_id}')

            if response.status_code == 200:
                data = response.json()
                if data['deleted_folder_count'] == 0:
                    return f"No folder with ID {folder_id}. Nothing deleted."
                return (
                    f"Deleted {data['deleted_folder_count']} folder(s) "
                    f"and {data['deleted_file_count']} file(s)."
                )
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error deleting folder: {e}", exc_info=True)
            return f"Unexpected error deleting folder: {e}"

    def upload(self, namespace: str, file_path: str, folder_id: Optional[int] = None) -> str:
        """
        Upload a local file with progress feedback.

        Uploads are not retried.

        Returns:
            Result message with the new file id
        """
        path = Path(file_path).expanduser()
        if not path.exists():
            return f"Error: File not found: {file_path}"
        if not path.is_file():
            return f"Error: Not a file: {file_path}"

        file_size = os.path.getsize(path)
        filename = path.name
        upload_timeout = self._calculate_upload_timeout(file_size)

        data = {'namespace': namespace}
        if folder_id is not None:
            data['folder_id'] = str(folder_id)

        try:
            with ProgressFileWrapper(str(path), file_size, filename) as wrapped:
                response = self.session.post(
                    '/api/upload',
                    files={'file': (filename, wrapped)},
                    data=data,
                    timeout=upload_timeout
                )

            if response.status_code == 201:
                result = response.json()
                return (
                    f"Uploaded: {result['display_name']} "
                    f"(ID: {result['id']}, Size: {format_file_size(result['size_bytes'])})"
                )
            return f"Error uploading {file_path}: {self._format_error(response)}"

        except httpx.ConnectError:
            sys.stdout.write('\r' + ' ' * 100 + '\r')
            sys.stdout.flush()
            return f"Error uploading {file_path}: Cannot connect to document server"
        except httpx.TimeoutException:
            sys.stdout.write('\r' + ' ' * 100 + '\r')
            sys.stdout.flush()
            return (
                f"Error uploading {file_path}: Upload timed out "
                f"(file size: {format_file_size(file_size)}, timeout: {upload_timeout:.1f}s)"
            )
        except OSError as e:
            return f"Error reading {file_path}: {e}"

    def download(self, file_id: int, output_path: Optional[str] = None) -> str:
        """
        Download a file by id with progress feedback.

        Args:
            file_id: File to download
            output_path: Target file or directory; defaults to the file's own name in the cwd

        Returns:
            Success message with download details
        """
        try:
            with self.session.stream('GET', f'/api/download/{file_id}') as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                filename = filename_from_disposition(
                    response.headers.get('Content-Disposition')
                ) or f"file-{file_id}"
                filename = Path(filename).name

                output_file = Path(output_path).expanduser() if output_path else Path.cwd() / filename
                if output_file.is_dir():
                    output_file = output_file / filename
                output_file.parent.mkdir(parents=True, exist_ok=True)

                downloaded = 0
                with open(output_file, 'wb') as f:
                    for chunk in response.iter_bytes(chunk_size=8192):
                        f.write(chunk)
                        downloaded += len(chunk)
                        sys.stdout.write(
                            f"\rDownloading {filename}: {GREEN}{format_file_size(downloaded)}{RESET}"
                        )
                        sys.stdout.flush()

                sys.stdout.write('\n')
                sys.stdout.flush()

                return f"Downloaded: {filename} ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

        except httpx.ConnectError:
            return "Error: Cannot connect to document server. Is it running?"
        except httpx.TimeoutException:
            return "Error: Request timed out. Server may be overloaded."
        except OSError as e:
            return f"Error writing file: {e}"

    def delete_file(self, file_id: int) -> str:
        try:
            response = self._request_with_retry('DELETE', f'/api/files/{file_id}')

            if response.status_code == 200:
                if response.json()['deleted']:
                    return f"Deleted file {file_id}."
                return f"No file with ID {file_id}. Nothing deleted."
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error deleting file: {e}", exc_info=True)
            return f"Unexpected error deleting file: {e}"

    def search(self, namespace: str, term: str) -> str:
        """
        Search file names in a namespace.

        Returns:
            Formatted list of matches, newest first
        """
        try:
            response = self._request_with_retry(
                'GET',
                '/api/search',
                params={'query': term, 'namespace': namespace}
            )

            if response.status_code == 200:
                files = response.json()['files']
                if not files:
                    return f"No files matching '{term}'."

                output = [f"Found {len(files)} file(s) matching '{term}':\n"]
                for file_meta in files:
                    output.append(self._describe_file(file_meta))
                return '\n'.join(output)
            return f"Error: {self._format_error(response)}"

        except ConnectionError as e:
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Unexpected error searching files: {e}", exc_info=True)
            return f"Unexpected error searching files: {e}"

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
