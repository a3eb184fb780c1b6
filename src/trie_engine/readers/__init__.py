from .plain_text import PlainTextReader

__all__ = ["PlainTextReader"]
