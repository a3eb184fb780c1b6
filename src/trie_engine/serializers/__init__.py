from .file import Serializer
from .json_serializer import JsonSerializer
from .pickle_serializer import PickleSerializer
from .zip_serializer import ZipSerializer

__all__ = [
    "JsonSerializer",
    "PickleSerializer",
    "Serializer",
    "ZipSerializer",
]
