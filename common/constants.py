"""Project-wide constants (namespaces, limits, default ports)."""

NAMESPACE_MINE: str = "mine"
NAMESPACE_SHARED: str = "shared"
NAMESPACES: tuple = (NAMESPACE_MINE, NAMESPACE_SHARED)

# Query value selecting files stored at the namespace root
ROOT_FOLDER_SENTINEL: str = "root"

MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024  # 50 MiB
SEARCH_RESULT_LIMIT: int = 50
STREAM_PIECE_SIZE: int = 64 * 1024

DEFAULT_SERVER_PORT: int = 3000
