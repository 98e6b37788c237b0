"""
Schema model and module loader.

The code generator only reads the objects defined here.
"""

from .models import (
    ELIGIBLE_KINDS,
    BaseKind,
    BaseNode,
    ColumnNode,
    Enumeration,
    Module,
    NamedNumber,
    Node,
    NodeKind,
    NotificationNode,
    Range,
    RowNode,
    ScalarNode,
    TableNode,
    Type,
)
from .loader import LoadError, SchemaLoader

__all__ = [
    "ELIGIBLE_KINDS",
    "BaseKind",
    "BaseNode",
    "ColumnNode",
    "Enumeration",
    "Module",
    "NamedNumber",
    "Node",
    "NodeKind",
    "NotificationNode",
    "Range",
    "RowNode",
    "ScalarNode",
    "TableNode",
    "Type",
    "LoadError",
    "SchemaLoader",
]
