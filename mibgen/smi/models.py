"""
Schema model for loaded MIB modules.

Nodes are a tagged union: one frozen dataclass per node kind, each
carrying only the payload that kind has. The generation engine only
reads these objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, FrozenSet, Iterable, List, Optional, Tuple, Union


class NodeKind(Enum):
    """Node kinds the code generator understands."""

    SCALAR = "Scalar"
    TABLE = "Table"
    ROW = "Row"
    COLUMN = "Column"
    NOTIFICATION = "Notification"

    def __str__(self) -> str:
        return self.value


ELIGIBLE_KINDS: FrozenSet[NodeKind] = frozenset(NodeKind)


class BaseKind(Enum):
    """Primitive base types, named as gosmi names them."""

    UNKNOWN = "Unknown"
    INTEGER32 = "Integer32"
    OCTET_STRING = "OctetString"
    OBJECT_IDENTIFIER = "ObjectIdentifier"
    UNSIGNED32 = "Unsigned32"
    INTEGER64 = "Integer64"
    UNSIGNED64 = "Unsigned64"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    FLOAT128 = "Float128"
    ENUM = "Enum"
    BITS = "Bits"
    POINTER = "Pointer"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NamedNumber:
    name: str
    value: int


@dataclass(frozen=True)
class Range:
    base_kind: BaseKind
    min_value: int
    max_value: int


@dataclass(frozen=True)
class Enumeration:
    base_kind: BaseKind
    values: Tuple[NamedNumber, ...] = ()


@dataclass(frozen=True)
class Type:
    """A named data shape referenced by scalar and column nodes."""

    name: str
    base_kind: BaseKind
    enum: Optional[Enumeration] = None
    ranges: Tuple[Range, ...] = ()
    format: Optional[str] = None
    units: Optional[str] = None


@dataclass(frozen=True)
class BaseNode:
    """Fields common to every node kind."""

    kind: ClassVar[NodeKind]

    name: str
    oid: Tuple[int, ...]

    @property
    def oid_len(self) -> int:
        return len(self.oid)

    def render_numeric(self) -> str:
        """Dotted rendering of the OID, e.g. ``1.3.6.1.2.1.2.1``."""
        return ".".join(str(sub_id) for sub_id in self.oid)


@dataclass(frozen=True)
class ScalarNode(BaseNode):
    kind: ClassVar[NodeKind] = NodeKind.SCALAR

    type: Optional[Type] = None


@dataclass(frozen=True)
class ColumnNode(BaseNode):
    kind: ClassVar[NodeKind] = NodeKind.COLUMN

    type: Optional[Type] = None


@dataclass(frozen=True)
class RowNode(BaseNode):
    kind: ClassVar[NodeKind] = NodeKind.ROW

    columns: Tuple[ColumnNode, ...] = ()
    index: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class TableNode(BaseNode):
    kind: ClassVar[NodeKind] = NodeKind.TABLE

    row: Optional[RowNode] = None


@dataclass(frozen=True)
class NotificationNode(BaseNode):
    kind: ClassVar[NodeKind] = NodeKind.NOTIFICATION

    objects: Tuple["Node", ...] = ()


Node = Union[ScalarNode, TableNode, RowNode, ColumnNode, NotificationNode]


@dataclass
class Module:
    """A loaded module and its nodes in loader order."""

    name: str
    nodes: List[Node] = field(default_factory=list)

    def get_nodes(self, kinds: Iterable[NodeKind] = ELIGIBLE_KINDS) -> List[Node]:
        """Return nodes whose kind is in ``kinds``, keeping their order."""
        wanted = frozenset(kinds)
        return [node for node in self.nodes if node.kind in wanted]
