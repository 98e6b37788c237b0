import pytest

from mibgen.codegen.core.declarations import Cast, Ref
from mibgen.codegen.core.generator import GeneratorError
from mibgen.codegen.core.type_registry import TypeRegistry
from mibgen.codegen.languages.go import GoGenerator
from mibgen.codegen.languages.go.render import quote, render_expr
from mibgen.smi.models import BaseKind, ColumnNode, Range, ScalarNode, TableNode, Type

IF_NUMBER_DECLARATION = """\
var ifNumberNode = models.ScalarNode{
\tBaseNode: models.BaseNode{
\t\tName: "ifNumber",
\t\tOid: types.Oid{1, 3, 6, 1, 2, 1, 2, 1, 0},
\t\tOidFormatted: "1.3.6.1.2.1.2.1.0",
\t\tOidLen: 9,
\t},
\tType: models.Type{
\t\tBaseType: types.BaseTypeInteger32,
\t\tName: "Integer32",
\t},
}"""


def _render(generator: GoGenerator, declaration) -> str:
    return generator.render_declarations([declaration]).rstrip("\n")


def test_scalar_address_gets_instance_suffix(generator: GoGenerator, if_nodes) -> None:
    base = dict(generator.base_node(if_nodes["ifNumber"]).fields)

    assert render_expr(base["Oid"]) == "types.Oid{1, 3, 6, 1, 2, 1, 2, 1, 0}"
    assert base["OidFormatted"].value == "1.3.6.1.2.1.2.1.0"
    assert base["OidLen"].value == 9
    assert base["Name"].value == "ifNumber"


def test_column_address_is_unchanged(generator: GoGenerator, if_nodes) -> None:
    base = dict(generator.base_node(if_nodes["ifIndex"]).fields)

    assert render_expr(base["Oid"]) == "types.Oid{1, 3, 6, 1, 2, 1, 2, 2, 1, 1}"
    assert base["OidFormatted"].value == "1.3.6.1.2.1.2.2.1.1"
    assert base["OidLen"].value == 10


def test_scalar_declaration_text(
    generator: GoGenerator, registry: TypeRegistry, if_nodes
) -> None:
    declaration = generator.node_declaration(if_nodes["ifNumber"], registry)

    assert _render(generator, declaration) == IF_NUMBER_DECLARATION
    assert len(registry) == 0


def test_named_type_is_registered_and_referenced(
    generator: GoGenerator, registry: TypeRegistry, if_nodes
) -> None:
    declaration = generator.node_declaration(if_nodes["ifRowStatus"], registry)

    assert dict(declaration.value.fields)["Type"] == Ref("RowStatusType")
    assert "RowStatus" in registry
    assert "\tType: RowStatusType,\n" in _render(generator, declaration)


def test_shared_type_registered_once_across_modules(
    generator: GoGenerator, registry: TypeRegistry, make_module, row_status: Type
) -> None:
    first = make_module(
        "FIRST-MIB", ScalarNode(name="firstStatus", oid=(1, 3, 6, 1, 4, 1, 1, 1), type=row_status)
    )
    second = make_module(
        "SECOND-MIB", ScalarNode(name="secondStatus", oid=(1, 3, 6, 1, 4, 1, 2, 1), type=row_status)
    )

    generator.generate_module(first, registry)
    generator.generate_module(second, registry)

    assert [name for name, _ in registry.flush()] == ["RowStatus"]


def test_table_references_its_row(
    generator: GoGenerator, registry: TypeRegistry, if_nodes
) -> None:
    text = _render(generator, generator.node_declaration(if_nodes["ifTable"], registry))

    assert text.startswith("var ifTableNode = models.TableNode{\n")
    assert "\tRow: ifEntryNode,\n" in text


def test_table_without_row_fails(generator: GoGenerator, registry: TypeRegistry) -> None:
    table = TableNode(name="lonelyTable", oid=(1, 3, 6, 1, 4, 1, 3))

    with pytest.raises(GeneratorError, match="lonelyTable"):
        generator.node_declaration(table, registry)


def test_row_lists_columns_and_index_in_order(
    generator: GoGenerator, registry: TypeRegistry, if_nodes
) -> None:
    text = _render(generator, generator.node_declaration(if_nodes["ifEntry"], registry))

    assert (
        "\tColumns: []models.ColumnNode{\n"
        "\t\tifIndexNode,\n"
        "\t\tifRowStatusNode,\n"
        "\t},\n"
    ) in text
    assert "\tIndex: []models.ColumnNode{\n\t\tifIndexNode,\n\t},\n" in text
    assert "Type:" not in text


def test_notification_casts_non_scalar_objects(
    generator: GoGenerator, registry: TypeRegistry, if_nodes
) -> None:
    declaration = generator.node_declaration(if_nodes["linkDown"], registry)
    objects = dict(declaration.value.fields)["Objects"]

    assert objects.items == (
        Cast("models.ScalarNode", Ref("ifIndexNode")),
        Ref("ifNumberNode"),
    )
    text = _render(generator, declaration)
    assert "\t\tmodels.ScalarNode(ifIndexNode),\n\t\tifNumberNode,\n" in text


def test_node_without_type_fails(generator: GoGenerator, registry: TypeRegistry) -> None:
    column = ColumnNode(name="untyped", oid=(1, 3, 6, 1, 4, 1, 4, 1))

    with pytest.raises(GeneratorError, match="untyped"):
        generator.node_declaration(column, registry)


def test_empty_module_generates_nothing(
    generator: GoGenerator, registry: TypeRegistry, make_module
) -> None:
    assert generator.generate_module(make_module("EMPTY-MIB"), registry) == ""


def test_module_struct_and_value(
    generator: GoGenerator, registry: TypeRegistry, make_module, if_nodes
) -> None:
    module = make_module(
        "IF-MIB",
        if_nodes["ifNumber"],
        if_nodes["ifTable"],
        if_nodes["ifEntry"],
        if_nodes["ifIndex"],
        if_nodes["ifRowStatus"],
        if_nodes["linkDown"],
    )

    text = generator.generate_module(module, registry)

    assert text.startswith(
        "type ifMibModule struct {\n"
        "\tIfNumber models.ScalarNode\n"
        "\tIfTable models.TableNode\n"
        "\tIfEntry models.RowNode\n"
        "\tIfIndex models.ColumnNode\n"
        "\tIfRowStatus models.ColumnNode\n"
        "\tLinkDown models.NotificationNode\n"
        "}\n"
    )
    assert (
        "var IfMib = ifMibModule{\n"
        "\tIfNumber: ifNumberNode,\n"
        "\tIfTable: ifTableNode,\n"
    ) in text
    # Node declarations follow module order
    positions = [
        text.index(f"var {name}Node = ")
        for name in ("ifNumber", "ifTable", "ifEntry", "ifIndex", "ifRowStatus", "linkDown")
    ]
    assert positions == sorted(positions)
    assert IF_NUMBER_DECLARATION in text


def test_generate_types(generator: GoGenerator, row_status: Type) -> None:
    text = generator.generate_types([("RowStatus", row_status)])

    assert text.startswith("var RowStatusType = models.Type{\n")
    assert "\tBaseType: types.BaseTypeEnum,\n" in text
    assert "\tEnum: &models.Enum{\n" in text
    assert '\t\t\tmodels.NamedNumber{Name: "active", Value: 1},\n' in text
    assert '\tName: "RowStatus",\n' in text


def test_generate_types_with_ranges_and_format(generator: GoGenerator) -> None:
    display_string = Type(
        name="DisplayString",
        base_kind=BaseKind.OCTET_STRING,
        ranges=(Range(BaseKind.UNSIGNED32, 0, 255),),
        format="255a",
        units="characters",
    )

    text = generator.generate_types([("DisplayString", display_string)])

    assert '\tFormat: "255a",\n' in text
    assert (
        "\t\tmodels.Range{BaseType: types.BaseTypeUnsigned32, MinValue: 0, MaxValue: 255},\n"
    ) in text
    assert '\tUnits: "characters",\n' in text


def test_render_header(generator: GoGenerator) -> None:
    header = generator.render_header()

    assert header.startswith("// Code generated by mibgen. DO NOT EDIT.\n\npackage mibs\n")
    assert '\t"github.com/sleepinggenius2/gosmi/models"\n' in header
    assert '\t"github.com/sleepinggenius2/gosmi/types"\n' in header
    assert header.count("package ") == 1


def test_quote_escapes() -> None:
    assert quote('say "hi"\n') == '"say \\"hi\\"\\n"'
    assert quote("tab\there") == '"tab\\there"'
    assert quote("\x00") == '"\\u0000"'
