"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    DownloadCommand,
    ListCommand,
    MakeFolderCommand,
    NamespaceCommand,
    RemoveFileCommand,
    RemoveFolderCommand,
    SearchCommand,
    TreeCommand,
    UploadCommand,
)
from cli.server_client import ServerClient

logger = get_logger(__name__)


_client: Optional[ServerClient] = None


def get_client() -> ServerClient:
    """
    Get or create global ServerClient instance.

    Returns:
        ServerClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new ServerClient instance")
        config = Config(Path.home() / '.askdoc' / 'config.json')
        _client = ServerClient(config)
    return _client


def handle_namespace(cmd: NamespaceCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'ns' command.

    Args:
        cmd: NamespaceCommand with the namespace to activate
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Confirmation or error message
    """
    if client is None:
        client = get_client()
    try:
        client.config.set_namespace(cmd.namespace)
    except ValueError as e:
        return f"Error: {e}"
    return f"Active namespace: {cmd.namespace}"


def handle_tree(cmd: TreeCommand, client: Optional[ServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.list_folders(client.config.get_namespace())


def handle_list(cmd: ListCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'ls' command.

    Args:
        cmd: ListCommand with an optional folder selector
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    logger.info(f"Executing ls command: folder={cmd.folder}")
    if client is None:
        client = get_client()
    return client.list_files(client.config.get_namespace(), cmd.folder)


def handle_make_folder(cmd: MakeFolderCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'mkdir' command.

    Args:
        cmd: MakeFolderCommand with name and optional parent_id
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return client.create_folder(client.config.get_namespace(), cmd.name, cmd.parent_id)


def handle_remove_folder(cmd: RemoveFolderCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'rmdir' command.

    Args:
        cmd: RemoveFolderCommand with folder_id
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Deletion summary or error message
    """
    logger.info(f"Executing rmdir command: folder_id={cmd.folder_id}")
    if client is None:
        client = get_client()
    return client.delete_folder(cmd.folder_id)


def handle_upload(cmd: UploadCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local path and optional folder_id
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Success or error message with upload result
    """
    logger.info(f"Executing upload command: path={cmd.path} folder_id={cmd.folder_id}")
    if client is None:
        client = get_client()
    result = client.upload(client.config.get_namespace(), cmd.path, cmd.folder_id)
    logger.debug("Upload command completed")
    return result


def handle_download(cmd: DownloadCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with file_id and optional output_path
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    logger.info(f"Executing download command: file_id={cmd.file_id} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    result = client.download(cmd.file_id, cmd.output_path)
    logger.debug("Download command completed")
    return result


def handle_remove_file(cmd: RemoveFileCommand, client: Optional[ServerClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.delete_file(cmd.file_id)


def handle_search(cmd: SearchCommand, client: Optional[ServerClient] = None) -> str:
    """
    Handle 'search' command.

    Args:
        cmd: SearchCommand with the search term
        client: Optional ServerClient for dependency injection (testing)

    Returns:
        Formatted list of matching files
    """
    if client is None:
        client = get_client()
    return client.search(client.config.get_namespace(), cmd.term)
