"""
Go code generator implementation.

Generates gosmi ``models`` declarations for MIB modules: one struct type
and one populated value per module, one value per node, and one
``models.Type`` value per registered non-primitive type.
"""

from typing import List, Optional, Sequence, Tuple
from pathlib import Path

from ....smi.models import (
    ELIGIBLE_KINDS,
    ColumnNode,
    Module,
    Node,
    NodeKind,
    NotificationNode,
    RowNode,
    ScalarNode,
    TableNode,
    Type,
)
from ...core.config import GeneratorConfig
from ...core.declarations import (
    Cast,
    CompositeLit,
    Declaration,
    Expr,
    ListExpr,
    Literal,
    Ref,
    StructDecl,
    StructField,
    VarDecl,
)
from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import (
    format_module_name,
    format_module_var_name,
    format_node_name,
    format_node_var_name,
    format_type_var_name,
)
from ...core.type_registry import TypeRegistry, is_primitive
from .formatter import GoFormatter
from .render import render_expr
from .types import (
    BASE_NODE_TYPE,
    COLUMN_LIST_TYPE,
    HEADER_IMPORTS,
    OID_TYPE,
    SCALAR_LIST_TYPE,
    node_type_name,
    type_literal,
)

GENERATED_BANNER = "Code generated by mibgen. DO NOT EDIT."


class GoGenerator(CodeGenerator):
    """Code generator for gosmi model declarations."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """
        Raises:
            ConfigError: If the configured formatter cannot be used
        """
        super().__init__(config)
        self.package_name = self.config.package_name
        self.formatter = GoFormatter(
            self.config.formatter,
            self.config.custom.get("gofmt_path", "gofmt"),
        )

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    def type_reference_name(self, type_name: str) -> str:
        return format_type_var_name(type_name)

    def render_header(self) -> str:
        """Render package clause and imports using the header template."""
        return self.render_template(
            "header.go.j2",
            {
                "banner": GENERATED_BANNER,
                "package_name": self.package_name,
                "imports": HEADER_IMPORTS,
            },
        )

    def format_code(self, code: str) -> str:
        return self.formatter.format(code)

    # Module emitter

    def generate_module(self, module: Module, registry: TypeRegistry) -> str:
        """Generate the declarations of one module, or "" if it has no eligible nodes."""
        nodes = module.get_nodes(ELIGIBLE_KINDS)
        if not nodes:
            return ""

        declarations: List[Declaration] = [
            self.module_struct(module.name, nodes),
            self.module_var(module.name, nodes),
        ]
        declarations.extend(self.node_declaration(node, registry) for node in nodes)
        return self.render_declarations(declarations)

    def generate_types(self, types: Sequence[Tuple[str, Type]]) -> str:
        """Generate ``var <Name>Type = models.Type{...}`` for each registered type."""
        declarations = [
            VarDecl(self.type_reference_name(name), type_literal(type_))
            for name, type_ in types
        ]
        return self.render_declarations(declarations)

    def module_struct(self, module_name: str, nodes: Sequence[Node]) -> StructDecl:
        fields = tuple(
            StructField(format_node_name(node.name), node_type_name(node.kind))
            for node in nodes
        )
        return StructDecl(format_module_var_name(module_name), fields)

    def module_var(self, module_name: str, nodes: Sequence[Node]) -> VarDecl:
        fields = tuple(
            (format_node_name(node.name), Ref(format_node_var_name(node.name)))
            for node in nodes
        )
        return VarDecl(
            format_module_name(module_name),
            CompositeLit(format_module_var_name(module_name), fields),
        )

    # Node serializer

    def node_declaration(self, node: Node, registry: TypeRegistry) -> VarDecl:
        """Build the value declaration for one node."""
        fields = [("BaseNode", self.base_node(node))]
        fields.extend(self._node_payload(node, registry))
        return VarDecl(
            format_node_var_name(node.name),
            CompositeLit(node_type_name(node.kind), tuple(fields)),
        )

    def base_node(self, node: Node) -> CompositeLit:
        """
        Build ``models.BaseNode{...}``.

        Scalars are addressed by their instance, so their OID gets a
        trailing 0 sub-identifier. Columns are left as they are.
        """
        oid = tuple(node.oid)
        oid_formatted = node.render_numeric()
        oid_len = node.oid_len
        if node.kind == NodeKind.SCALAR:
            oid = oid + (0,)
            oid_formatted += ".0"
            oid_len += 1

        return CompositeLit(
            BASE_NODE_TYPE,
            (
                ("Name", Literal(node.name)),
                ("Oid", ListExpr(OID_TYPE, tuple(Literal(i) for i in oid), inline=True)),
                ("OidFormatted", Literal(oid_formatted)),
                ("OidLen", Literal(oid_len)),
            ),
        )

    def _node_payload(
        self, node: Node, registry: TypeRegistry
    ) -> List[Tuple[str, Expr]]:
        if isinstance(node, (ScalarNode, ColumnNode)):
            return [("Type", self.type_expression(node, registry))]

        if isinstance(node, TableNode):
            if node.row is None:
                raise GeneratorError(f"Table {node.name} has no row")
            return [("Row", Ref(format_node_var_name(node.row.name)))]

        if isinstance(node, RowNode):
            return [
                ("Columns", self._node_refs(COLUMN_LIST_TYPE, node.columns)),
                ("Index", self._node_refs(COLUMN_LIST_TYPE, node.index)),
            ]

        if isinstance(node, NotificationNode):
            objects = tuple(
                Ref(format_node_var_name(obj.name))
                if obj.kind == NodeKind.SCALAR
                else Cast(node_type_name(NodeKind.SCALAR), Ref(format_node_var_name(obj.name)))
                for obj in node.objects
            )
            return [("Objects", ListExpr(SCALAR_LIST_TYPE, objects))]

        raise GeneratorError(f"Unsupported node kind for {node.name}: {type(node).__name__}")

    def type_expression(self, node: Node, registry: TypeRegistry) -> Expr:
        """Inline a primitive type, or register the type and reference it."""
        if node.type is None:
            raise GeneratorError(f"Node {node.name} has no type")

        if is_primitive(node.type):
            return type_literal(node.type)

        reference, _ = registry.get_or_register(node.type)
        return Ref(reference)

    def _node_refs(self, type_name: str, nodes: Sequence[Node]) -> ListExpr:
        return ListExpr(
            type_name, tuple(Ref(format_node_var_name(node.name)) for node in nodes)
        )

    # Rendering

    def render_declarations(self, declarations: Sequence[Declaration]) -> str:
        """Render declarations through the templates, separated by blank lines."""
        blocks = []
        for declaration in declarations:
            if isinstance(declaration, StructDecl):
                blocks.append(
                    self.render_template(
                        "struct.go.j2",
                        {"name": declaration.name, "fields": declaration.fields},
                    )
                )
            elif isinstance(declaration, VarDecl):
                blocks.append(
                    self.render_template(
                        "var.go.j2",
                        {
                            "name": declaration.name,
                            "value": render_expr(declaration.value),
                        },
                    )
                )
            else:
                raise GeneratorError(
                    f"Unsupported declaration: {type(declaration).__name__}"
                )
        return "\n".join(blocks)

