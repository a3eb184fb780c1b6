"""Provider registries and the configuration file parser."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, Union, cast

from .compressor import Compressor
from .nodes import Node, RawNode
from .readers import PlainTextReader
from .serializers import JsonSerializer, PickleSerializer, ZipSerializer


class ConfigBoolParsingError(Exception):
    """Raised when the parsing of bool strings in
    the config file was not successful.
    """


class ConfigNotFoundError(Exception):
    """Raised when any of the configuration settings is not provided."""


class UnknownProviderError(Exception):
    """Raised when no provider handles a file and there is no default."""


class ProviderCollection:
    """Providers (readers or serializers) keyed by file extension."""

    def __init__(
        self,
        name: str,
        providers: Optional[dict[str, Any]] = None,
        default: Any = None,
    ) -> None:
        """Initialize the collection.

        Args:
            name (str): What the providers are, used in error messages.
            providers (dict, optional): Initial providers by extension.
            default (optional): Provider used for unknown extensions. Must
            be one of ``providers``; the first one is used when not given.

        """
        self.name = name
        self._providers: dict[str, Any] = {}
        self._default: Any = None
        self._initial_providers = dict(providers or {})
        self._initial_default = default
        self.reset()

    def add(self, extension: str, provider: Any) -> None:
        """Register ``provider`` for files ending in ``.extension``."""
        self._providers[extension.lstrip(".").lower()] = provider

    def __getitem__(self, extension: str) -> Any:
        return self._providers[extension.lstrip(".").lower()]

    def __contains__(self, extension: object) -> bool:
        return (
            isinstance(extension, str)
            and extension.lstrip(".").lower() in self._providers
        )

    @property
    def providers(self) -> dict[str, Any]:
        return dict(self._providers)

    @property
    def formats(self) -> list[str]:
        return list(self._providers)

    @property
    def default(self) -> Any:
        return self._default

    @default.setter
    def default(self, provider: Any) -> None:
        if provider is not None and not any(
            registered is provider for registered in self._providers.values()
        ):
            raise ValueError(
                f"The default {self.name} provider must be registered first.",
            )
        self._default = provider

    def extension_of(self, provider: Any) -> Optional[str]:
        """Return the first extension ``provider`` is registered for."""
        for extension, registered in self._providers.items():
            if registered is provider:
                return extension
        return None

    def resolve(self, path: Union[str, Path]) -> Any:
        """Return the provider for ``path`` based on its extension.

        Raises:
            UnknownProviderError: If the extension is unknown and there is
            no default provider.

        """
        extension = Path(path).suffix.lstrip(".").lower()
        provider = self._providers.get(extension, self._default)
        if provider is None:
            raise UnknownProviderError(
                f"No {self.name} provider for '{path}' and no default set.",
            )
        return provider

    def reset(self) -> None:
        """Restore the providers and default given at creation time."""
        self._providers = {}
        for extension, provider in self._initial_providers.items():
            self.add(extension, provider)
        self._default = None
        if self._initial_default is not None:
            self.default = self._initial_default
        elif self._providers:
            self._default = next(iter(self._providers.values()))


class Properties:
    """Everything ``create``, ``load`` and ``dump`` rely on."""

    def __init__(self) -> None:
        self.readers: ProviderCollection
        self.serializers: ProviderCollection
        self.compressor: Compressor
        self.root_builder: Callable[[], Node]
        self.reset()

    def reset(self) -> None:
        """Restore the built in readers, serializers and builders."""
        plain_text = PlainTextReader()
        self.readers = ProviderCollection(
            "reader",
            {"txt": plain_text},
            default=plain_text,
        )

        pickle_serializer = PickleSerializer()
        self.serializers = ProviderCollection(
            "serializer",
            {
                "pickle": pickle_serializer,
                "pkl": pickle_serializer,
                "marshal": pickle_serializer,
                "json": JsonSerializer(),
                "zip": ZipSerializer(self),
            },
            default=pickle_serializer,
        )
        self.compressor = Compressor()
        self.root_builder = RawNode

    def __repr__(self) -> str:
        return (
            f"Properties(readers={self.readers.formats}, "
            f"serializers={self.serializers.formats})"
        )


class EngineConfig:
    """A class to save the query server configuration settings."""

    def __init__(
        self,
        dictionary_path: Path,
        compress: bool,
        port: int,
        log_level: int = logging.INFO,
    ) -> None:
        """Initialize the configuration.

        Args:
            dictionary_path (Path): The word list, or dumped trie, to serve.
            compress (bool): Whether to compress the trie after building it.
            port (int): The port number the server will listen to.
            log_level (int): The logging level.

        """
        self.dictionary_path = dictionary_path
        self.compress = compress
        self.port = port
        self.log_level = log_level

    def __repr__(self) -> str:
        """Return a string representation of the configuration object.

        Returns:
            str: A formatted string representing the configuration settings.

        """
        return f"""
                Trie engine configuration settings:
                Dictionary path: {self.dictionary_path}
                Compress: {"YES" if self.compress else "NO"}
                Used port number: {self.port}
                Log level: {logging.getLevelName(self.log_level)}
            """


def parse_bool(key: str, val: str) -> bool:
    """Parse given values into boolean ones (True or False).

    Args:
        key (str): The key to parse the boolean for.
        val (str): The value to be parsed to boolean.

    Raises:
        ConfigBoolParsingError: If an error occured
        while parsing the value to boolean.

    Returns:
        bool: True or False depending on the output of the parser.

    """
    if val.strip().lower() in {"true", "1", "yes"}:
        return True
    if val.strip().lower() in {"false", "0", "no"}:
        return False

    raise ConfigBoolParsingError(
        f"Invalid boolean value for key '{key}' in the configuration file. "
        "Expected 'true', 'false', '1', '0', 'yes', or 'no' "
        "(case-insensitive).",
    )


def parse_log_level(val: str) -> int:
    """Parse a logging level name such as ``DEBUG`` or ``info``.

    Raises:
        ValueError: If the name is not a known logging level.

    """
    level = logging.getLevelName(val.strip().upper())
    if not isinstance(level, int):
        raise ValueError(
            f"Invalid log level '{val}' in the configuration file.",
        )
    return level


def load_config_file(config_file_path: Path) -> EngineConfig:
    """Load and parse the configuration file.

    Args:
        config_file_path (Path): Path to the config file.

    Raises:
        ConfigNotFoundError: If required settings are missing.
        FileNotFoundError: If a file does not exist.
        ValueError: If the port or the log level is invalid.

    Returns:
        EngineConfig: Parsed config object.

    """
    if not config_file_path.exists():
        raise FileNotFoundError(
            f"Missing required configuration file: '{config_file_path}'. "
            "Please ensure the file exists and the path is correct.",
        )

    dictionary_path = compress = port = None
    log_level = logging.INFO

    with config_file_path.open("r", encoding="utf-8") as file:
        for line in file:
            line = line.strip()

            # Skip blank lines and comments
            if not line or line.startswith("#"):
                continue

            key, sep, value = line.partition("=")
            if sep != "=":
                continue

            key = key.strip().lower()
            value = value.strip()

            if key == "dictionary":
                dictionary_path = Path(value)
            elif key == "compress":
                compress = parse_bool("compress", value)
            elif key == "port":
                port = int(value)
            elif key == "log_level":
                log_level = parse_log_level(value)

    required = {
        "dictionary": dictionary_path,
        "compress": compress,
        "port": port,
    }

    for key, val in required.items():
        if val is None:
            raise ConfigNotFoundError(
                f"Missing required configuration: '{key}'. "
                "Please ensure the config file includes a valid line for "
                f"'{key}'.",
            )

    if dictionary_path is not None and not dictionary_path.exists():
        raise FileNotFoundError(
            f"The required file {dictionary_path} doesn't exist.",
        )

    return EngineConfig(
        cast("Path", dictionary_path),
        cast("bool", compress),
        cast("int", port),
        log_level,
    )
