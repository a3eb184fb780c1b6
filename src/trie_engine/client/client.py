"""Asynchronous client for the trie query server."""

import asyncio
import time
from types import TracebackType
from typing import Optional, Union


class Client:
    """Sends ``COMMAND argument`` queries to a trie server.

    Usable as an async context manager, which connects on entry and closes
    the connection on exit.
    """

    def __init__(self, ip: str, port: int):
        """Initialize a client for the server at ``ip:port``.

        Args:
            ip (str): The server address.
            port (int): The server port.

        """
        self.ip = ip
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.last_elapsed_ms: Optional[float] = None

    async def __aenter__(self) -> "Client":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        """Open the connection, to be awaited before any query.

        Raises:
            ConnectionRefusedError: If nothing listens at ``ip:port``.

        """
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.ip,
                self.port,
            )
        except ConnectionRefusedError:
            print(f"Connection refused by the server at {self.ip}.")
            raise

        peername = self.writer.get_extra_info("peername")
        print(f"Connected to server at {peername[0]}:{peername[1]}")

    async def send_message(self, query_string: str) -> Union[str, None]:
        """Send one raw query line and wait for its response line.

        Args:
            query_string (str): The query, e.g. ``WORD hello``.

        Returns:
            str: The response without its trailing newline.
            None: If the client is not connected or the server closed the
            connection without answering.

        """
        if self.writer is None or self.reader is None:
            print("Client not connected. Call .connect() first.")
            return None

        started = time.perf_counter()
        try:
            self.writer.write(query_string.encode("utf-8"))
            await self.writer.drain()
            line = await self.reader.readline()
        except (ConnectionResetError, BrokenPipeError):
            print("Connection lost while waiting for the server's answer.")
            raise
        except OSError as e:
            print(f"OS Error during send: {e}")
            raise

        if not line:
            print("Server closed the connection unexpectedly, no answer.")
            return None

        self.last_elapsed_ms = (time.perf_counter() - started) * 1000
        return line.decode("utf-8").rstrip("\n")

    async def query(
        self,
        command: str,
        argument: str = "",
    ) -> Union[str, None]:
        """Send ``command`` with its argument, e.g. ``query("SCAN", "he")``."""
        query_string = f"{command} {argument}" if argument else command
        return await self.send_message(query_string)

    async def close(self) -> None:
        """Close the connection to the server."""
        if self.writer is None:
            print("No active connection to close.")
            return

        writer, self.reader, self.writer = self.writer, None, None
        try:
            if not writer.is_closing():
                writer.close()
            await writer.wait_closed()
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            print(f"Error while closing the connection: {e}")
            raise
        print("Connection closed.")
