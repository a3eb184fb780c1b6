import asyncio
import socket
import sys
import time
import weakref
from datetime import datetime
from pathlib import Path
from typing import Union

import trie_engine

from ..config import load_config_file
from ..container import Container
from ..logger import log_query
from .query_handler import handle_query

MAX_CHUNK_SIZE = 1024  # Maximum query size in bytes
OVERSIZED_QUERY_ERROR = "ERROR: Message exceeds maximum allowed size."
DRAIN_TIMEOUT = 0.05  # Seconds of silence ending an oversized message


def describe_peer(writer: asyncio.StreamWriter) -> tuple[str, str]:
    """Return the ``ip:port`` label and the IP of a connected client."""
    peername = writer.get_extra_info("peername")
    if not peername:
        return "UNKNOWN", "N/A"
    return f"{peername[0]}:{peername[1]}", peername[0]


def decode_query(data: bytes) -> str:
    """Decode a received query, dropping whitespace and null characters."""
    return data.decode("utf-8", errors="replace").strip().replace("\x00", "")


async def drain_message(reader: asyncio.StreamReader) -> int:
    """Consume the rest of an oversized message.

    Clients wait for an answer before sending their next query, so every
    byte received before the answer is sent belongs to the same message.

    Returns:
        int: The number of bytes discarded.

    """
    drained = 0
    while True:
        try:
            chunk = await asyncio.wait_for(
                reader.read(MAX_CHUNK_SIZE),
                DRAIN_TIMEOUT,
            )
        except asyncio.TimeoutError:
            return drained
        if not chunk:
            return drained
        drained += len(chunk)


async def close_writer(writer: asyncio.StreamWriter, peer: str) -> None:
    try:
        writer.close()
        await writer.wait_closed()
    except Exception as e:
        print(f"[SERVER] Error closing the connection to {peer}: {e}")


class Server:
    """Asyncio TCP server answering queries against one trie.

    The trie is built once at start-up and only read afterwards, so every
    connection shares it.
    """

    def __init__(self, ip: str, config_file_path: Path):
        self.ip = ip
        self.configuration_settings = load_config_file(config_file_path)
        self.is_running = True
        self.server_instance: Union[asyncio.Server, None] = None
        self.log_details: bool = False
        self._active_connections: weakref.WeakSet[asyncio.StreamWriter] = (
            weakref.WeakSet()
        )
        self.trie = self._build_trie()

    def _build_trie(self) -> Container:
        """Build the trie served to the clients.

        Dumped tries are loaded with the serializer matching their
        extension; anything else is read as a word list. The trie is
        compressed afterwards when the configuration asks for it.
        """
        dictionary_path = self.configuration_settings.dictionary_path
        extension = dictionary_path.suffix.lstrip(".")

        if extension in trie_engine.config().serializers:
            trie = trie_engine.load(dictionary_path)
        else:
            trie = trie_engine.create(dictionary_path)

        if self.configuration_settings.compress:
            trie.compress()

        kind = "compressed" if trie.compressed else "raw"
        print(
            f"[SERVER] Trie ready: {trie.size()} words from "
            f"{dictionary_path} ({kind})",
        )
        return trie

    @property
    def port(self) -> Union[int, None]:
        """The port actually listened on, None before ``listen``."""
        if self.server_instance is None or not self.server_instance.sockets:
            return None
        return int(self.server_instance.sockets[0].getsockname()[1])

    def _respond(self, data: bytes) -> tuple[str, str]:
        """Answer one received message.

        Returns:
            tuple: The decoded query and the response line, without the
            trailing newline.

        """
        if len(data) > MAX_CHUNK_SIZE:
            return "", OVERSIZED_QUERY_ERROR
        query = decode_query(data)
        return query, handle_query(self.trie, query)

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Answer the queries of one client until it disconnects.

        Args:
            reader (asyncio.StreamReader): The reader for the client
            connection.
            writer (asyncio.StreamWriter): The writer for the client
            connection.

        """
        peer, client_ip = describe_peer(writer)
        print(f"[SERVER] Client {peer} connected.")
        self._active_connections.add(writer)

        try:
            while self.is_running:
                started = time.perf_counter()

                # One extra byte tells oversized queries apart
                data = await reader.read(MAX_CHUNK_SIZE + 1)
                if not data:
                    print(f"[SERVER] Client {peer} disconnected.")
                    break

                query, response = self._respond(data)
                if response == OVERSIZED_QUERY_ERROR:
                    drained = len(data) + await drain_message(reader)
                    writer.write(f"{response}\n".encode())
                    await writer.drain()
                    print(
                        f"[SERVER] Rejected oversized query from {peer} "
                        f"({drained} bytes).",
                    )
                    continue

                writer.write(f"{response}\n".encode())
                await writer.drain()

                elapsed_ms = (time.perf_counter() - started) * 1000
                if self.log_details:
                    time_stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
                    log_query(time_stamp, client_ip, query, elapsed_ms)

                print(
                    f"[SERVER] {peer} '{query}' -> '{response[:50]}' "
                    f"({elapsed_ms:.2f} ms)",
                )

        except ConnectionResetError:
            print(f"[SERVER] Client {peer} forcefully disconnected.")
        except asyncio.IncompleteReadError:
            print(f"[SERVER] Client {peer} connection closed unexpectedly.")
        except Exception as e:
            print(
                f"[SERVER ERROR] Error handling client {peer}: {e}",
                file=sys.stderr,
            )
        finally:
            self._active_connections.discard(writer)
            await close_writer(writer, peer)
            print(f"[SERVER] Connection with {peer} closed.")

    async def listen(self, log_details: bool = False) -> None:
        """Bind the listening socket and start accepting connections.

        Args:
            log_details (bool): Whether to log every handled query.

        """
        self.log_details = log_details
        self.is_running = True

        listening_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listening_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listening_socket.bind((self.ip, self.configuration_settings.port))

        self.server_instance = await asyncio.start_server(
            self._handle_client,
            sock=listening_socket,
        )
        print(f"[SERVER] Answering trie queries on {self.ip}:{self.port}.")

    async def start(self, log_details: bool = True) -> None:
        """Start the server and serve until cancelled.

        Args:
            log_details (bool): Whether to log every handled query.

        """
        try:
            await self.listen(log_details)
            print("[SERVER] Press Ctrl+C to shut down.")
            assert self.server_instance is not None
            await self.server_instance.serve_forever()

        except asyncio.CancelledError:
            print("[SERVER] Server task cancelled.")
        except KeyboardInterrupt:
            print("\n[SERVER] Shutting down due to KeyboardInterrupt...")
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Gracefully stop the server.

        Stops accepting new connections, closes all active connections and
        closes the asyncio server.
        """
        print("[SERVER] Shutting down...")
        self.is_running = False

        for writer in list(self._active_connections):
            await close_writer(writer, describe_peer(writer)[0])
        self._active_connections.clear()

        if self.server_instance is not None:
            server_instance, self.server_instance = self.server_instance, None
            try:
                server_instance.close()
                await server_instance.wait_closed()
            except Exception as e:
                print(f"[SERVER] Error closing the listening socket: {e}")

        print("[SERVER] Server stopped.")
