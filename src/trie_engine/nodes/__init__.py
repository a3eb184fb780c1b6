from .compressed import CompressedNode
from .node import (
    InvalidOperationError,
    Node,
    node_from_dict,
    node_from_records,
)
from .raw import RawNode

__all__ = [
    "CompressedNode",
    "InvalidOperationError",
    "Node",
    "RawNode",
    "node_from_dict",
    "node_from_records",
]
