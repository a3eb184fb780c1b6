from .query_handler import handle_query
from .server import MAX_CHUNK_SIZE, Server

__all__ = ["MAX_CHUNK_SIZE", "Server", "handle_query"]
