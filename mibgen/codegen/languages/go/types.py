"""
Go type system for generated gosmi declarations.

Maps schema kinds to the gosmi identifiers the generated code uses and
builds the declaration-model expression for a type body.
"""

from ....smi.models import BaseKind, NodeKind, Type
from ...core.declarations import CompositeLit, ListExpr, Literal, Ref

MODELS_IMPORT = "github.com/sleepinggenius2/gosmi/models"
TYPES_IMPORT = "github.com/sleepinggenius2/gosmi/types"
HEADER_IMPORTS = (MODELS_IMPORT, TYPES_IMPORT)

OID_TYPE = "types.Oid"
TYPE_TYPE = "models.Type"
ENUM_TYPE = "models.Enum"
NAMED_NUMBER_LIST_TYPE = "[]models.NamedNumber"
NAMED_NUMBER_TYPE = "models.NamedNumber"
RANGE_LIST_TYPE = "[]models.Range"
RANGE_TYPE = "models.Range"
BASE_NODE_TYPE = "models.BaseNode"
COLUMN_LIST_TYPE = "[]models.ColumnNode"
SCALAR_LIST_TYPE = "[]models.ScalarNode"


def node_type_name(kind: NodeKind) -> str:
    """``NodeKind.SCALAR`` -> ``models.ScalarNode``."""
    return f"models.{kind.value}Node"


def base_type_ref(base_kind: BaseKind) -> Ref:
    """``BaseKind.INTEGER32`` -> ``types.BaseTypeInteger32``."""
    return Ref(f"types.BaseType{base_kind.value}")


def type_literal(type_: Type) -> CompositeLit:
    """
    Build the ``models.Type{...}`` value for a type.

    Fields follow gosmi's declaration order: BaseType, Enum, Format,
    Name, Ranges, Units. Optional fields are left out when unset.
    """
    fields = [("BaseType", base_type_ref(type_.base_kind))]

    if type_.enum is not None:
        values = tuple(
            CompositeLit(
                NAMED_NUMBER_TYPE,
                (("Name", Literal(value.name)), ("Value", Literal(value.value))),
                inline=True,
            )
            for value in type_.enum.values
        )
        fields.append(
            (
                "Enum",
                CompositeLit(
                    ENUM_TYPE,
                    (
                        ("BaseType", base_type_ref(type_.enum.base_kind)),
                        ("Values", ListExpr(NAMED_NUMBER_LIST_TYPE, values)),
                    ),
                    address_of=True,
                ),
            )
        )

    if type_.format:
        fields.append(("Format", Literal(type_.format)))

    fields.append(("Name", Literal(type_.name)))

    if type_.ranges:
        ranges = tuple(
            CompositeLit(
                RANGE_TYPE,
                (
                    ("BaseType", base_type_ref(type_range.base_kind)),
                    ("MinValue", Literal(type_range.min_value)),
                    ("MaxValue", Literal(type_range.max_value)),
                ),
                inline=True,
            )
            for type_range in type_.ranges
        )
        fields.append(("Ranges", ListExpr(RANGE_LIST_TYPE, ranges)))

    if type_.units:
        fields.append(("Units", Literal(type_.units)))

    return CompositeLit(TYPE_TYPE, tuple(fields))
