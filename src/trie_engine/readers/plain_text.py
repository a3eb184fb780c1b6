"""Read words from a plain text file, one word per line."""

from collections.abc import Iterator
from pathlib import Path
from typing import Union


class PlainTextReader:
    """Reader for plain text word lists."""

    def each_word(self, path: Union[str, Path]) -> Iterator[str]:
        """Yield every word in the file at ``path``.

        Args:
            path (str | Path): The path of the word list.

        Raises:
            FileNotFoundError: If the file does not exist.

        Yields:
            str: Each non-blank line, stripped of surrounding whitespace.

        """
        data_path = Path(path)
        try:
            # Open the file for reading with UTF-8 encoding
            with data_path.open("r", encoding="utf-8") as file:
                for line in file:
                    word = line.strip()
                    if word:
                        yield word

        except FileNotFoundError as e:
            raise FileNotFoundError(f"File not found: {data_path}") from e
