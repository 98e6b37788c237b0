"""
Loader for MIB modules compiled to JSON documents.

Documents follow the layout written by pysmi's JSON code generator: one
object per symbol keyed by symbol name, plus an ``imports`` entry.
The loader builds the read-only schema model the code generator walks.
"""

import dataclasses
from typing import Any, Dict, List, Optional, Set, Tuple

from ..logging_config import get_logger
from ..paths import SearchPath
from ..utils import DocumentError, find_module_document
from .models import (
    BaseKind,
    ColumnNode,
    Enumeration,
    Module,
    NamedNumber,
    Node,
    NotificationNode,
    Range,
    RowNode,
    ScalarNode,
    TableNode,
    Type,
)

logger = get_logger(__name__)

# SMI base syntax -> (primitive type name, base kind)
SMI_BASE_TYPES: Dict[str, Tuple[str, BaseKind]] = {
    "INTEGER": ("Integer32", BaseKind.INTEGER32),
    "Integer32": ("Integer32", BaseKind.INTEGER32),
    "OCTET STRING": ("OctetString", BaseKind.OCTET_STRING),
    "OctetString": ("OctetString", BaseKind.OCTET_STRING),
    "OBJECT IDENTIFIER": ("ObjectIdentifier", BaseKind.OBJECT_IDENTIFIER),
    "ObjectIdentifier": ("ObjectIdentifier", BaseKind.OBJECT_IDENTIFIER),
    "BITS": ("Bits", BaseKind.BITS),
    "Bits": ("Bits", BaseKind.BITS),
    "Unsigned32": ("Unsigned32", BaseKind.UNSIGNED32),
    "Integer64": ("Integer64", BaseKind.INTEGER64),
    "Unsigned64": ("Unsigned64", BaseKind.UNSIGNED64),
}

# Application types keep their own name
APPLICATION_TYPES: Dict[str, BaseKind] = {
    "Counter": BaseKind.UNSIGNED32,
    "Counter32": BaseKind.UNSIGNED32,
    "Counter64": BaseKind.UNSIGNED64,
    "Gauge": BaseKind.UNSIGNED32,
    "Gauge32": BaseKind.UNSIGNED32,
    "TimeTicks": BaseKind.UNSIGNED32,
    "IpAddress": BaseKind.OCTET_STRING,
    "NetworkAddress": BaseKind.OCTET_STRING,
    "Opaque": BaseKind.OCTET_STRING,
}

# Modules that only define SMI macros and base types
SMI_BASE_MODULES = {
    "SNMPv2-SMI",
    "SNMPv2-CONF",
    "RFC1155-SMI",
    "RFC1065-SMI",
    "RFC-1212",
    "RFC-1215",
}

OBJECT_NODE_TYPES = {"scalar", "table", "row", "column"}
MAX_TYPE_DEPTH = 16


class LoadError(Exception):
    """Raised when a module cannot be found or built."""

    def __init__(self, module_name: str, reason: str, not_found: bool = False):
        super().__init__(f"Loading module {module_name}: {reason}")
        self.module_name = module_name
        self.reason = reason
        self.not_found = not_found


def parse_oid(value: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in value.split(".") if part)


def _imports(document: Dict[str, Any]) -> Dict[str, List[str]]:
    imports = document.get("imports") or {}
    return {
        module: names
        for module, names in imports.items()
        if module != "class" and isinstance(names, list)
    }


def _is_type_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and entry.get("class") in ("textualconvention", "type")
        and isinstance(entry.get("type"), dict)
    )


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


def _ranges(constraints: Dict[str, Any], base_kind: BaseKind) -> Tuple[Range, ...]:
    ranges = []
    for key, range_kind in (("range", base_kind), ("size", BaseKind.UNSIGNED32)):
        for item in constraints.get(key) or []:
            ranges.append(
                Range(range_kind, _to_int(item["min"]), _to_int(item["max"]))
            )
    return tuple(ranges)


def _enumeration(syntax: Dict[str, Any]) -> Optional[Enumeration]:
    bits = syntax.get("bits")
    if bits:
        values = tuple(NamedNumber(name, _to_int(v)) for name, v in bits.items())
        return Enumeration(BaseKind.BITS, values)

    constraints = syntax.get("constraints") or {}
    enumeration = constraints.get("enumeration")
    if enumeration:
        values = tuple(
            NamedNumber(name, _to_int(v)) for name, v in enumeration.items()
        )
        return Enumeration(BaseKind.ENUM, values)

    return None


class _ModuleBuild:
    """Scratch state while one module's nodes are being built."""

    def __init__(self, name: str, document: Dict[str, Any]):
        self.name = name
        self.document = document
        self.nodes: Dict[str, Node] = {}
        self.entries: Dict[str, Dict[str, Any]] = {}
        self.columns: List[ColumnNode] = []


class SchemaLoader:
    """Loads modules from a search path and keeps them in load order."""

    def __init__(self, search_path: Optional[SearchPath] = None, timeout: int = 30):
        self.search_path = search_path if search_path is not None else SearchPath()
        self.timeout = timeout
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._modules: Dict[str, Module] = {}
        self._nodes: Dict[str, Dict[str, Node]] = {}
        self._loading: Set[str] = set()
        self._missing: Set[str] = set()

    def load_module(self, name: str) -> Module:
        """
        Load a module and, first, everything it imports.

        Raises:
            LoadError: If the module cannot be found, read or built
        """
        if name in self._modules:
            return self._modules[name]

        document = self._read_document(name)
        if document is None:
            raise LoadError(
                name,
                f"module not found in search path {self.search_path.entries}",
                not_found=True,
            )

        self._loading.add(name)
        try:
            self._load_imports(name, document)
            module = self._build_module(name, document)
        finally:
            self._loading.discard(name)

        self._modules[name] = module
        logger.info("Loaded module %s (%d nodes)", name, len(module.nodes))
        return module

    def loaded_modules(self) -> List[Module]:
        """Return every loaded module, imports ahead of their importers."""
        return list(self._modules.values())

    def _read_document(self, name: str) -> Optional[Dict[str, Any]]:
        if name in self._documents:
            return self._documents[name]

        try:
            found = find_module_document(name, self.search_path.entries, self.timeout)
        except DocumentError as e:
            raise LoadError(name, str(e)) from e

        if found is None:
            return None

        source, document = found
        if not isinstance(document, dict):
            raise LoadError(name, f"{source} does not hold a JSON object")

        logger.debug("Module %s: read from %s", name, source)
        self._documents[name] = document
        return document

    def _load_imports(self, name: str, document: Dict[str, Any]):
        for imported in _imports(document):
            if imported in self._modules or imported in self._loading:
                continue
            if imported in self._missing:
                continue
            try:
                self.load_module(imported)
            except LoadError as e:
                if e.not_found and e.module_name == imported:
                    self._missing.add(imported)
                    log = logger.debug if imported in SMI_BASE_MODULES else logger.warning
                    log("Module %s: imported module %s not found", name, imported)
                    continue
                raise

    def _build_module(self, name: str, document: Dict[str, Any]) -> Module:
        build = _ModuleBuild(name, document)

        for symbol, entry in document.items():
            if not isinstance(entry, dict) or "oid" not in entry:
                continue
            if entry.get("class") == "objecttype" and entry.get("nodetype") in OBJECT_NODE_TYPES:
                build.entries[symbol] = entry
            elif entry.get("class") == "notificationtype":
                build.entries[symbol] = entry

        # Columns and scalars first, then rows, tables, notifications
        for symbol, entry in build.entries.items():
            nodetype = entry.get("nodetype")
            if nodetype == "column":
                column = ColumnNode(
                    name=symbol,
                    oid=parse_oid(entry["oid"]),
                    type=self._node_type(name, entry),
                )
                build.nodes[symbol] = column
                build.columns.append(column)
            elif nodetype == "scalar":
                build.nodes[symbol] = ScalarNode(
                    name=symbol,
                    oid=parse_oid(entry["oid"]),
                    type=self._node_type(name, entry),
                )

        for symbol, entry in build.entries.items():
            if entry.get("nodetype") == "row":
                self._build_row(build, symbol)

        for symbol, entry in build.entries.items():
            if entry.get("nodetype") == "table":
                build.nodes[symbol] = self._build_table(build, symbol, entry)

        for symbol, entry in build.entries.items():
            if entry.get("class") == "notificationtype":
                objects = tuple(
                    self._resolve_node(build, ref) for ref in entry.get("objects") or []
                )
                build.nodes[symbol] = NotificationNode(
                    name=symbol, oid=parse_oid(entry["oid"]), objects=objects
                )

        self._nodes[name] = build.nodes
        nodes = sorted(build.nodes.values(), key=lambda node: node.oid)
        return Module(name=name, nodes=nodes)

    def _build_row(self, build: _ModuleBuild, symbol: str) -> RowNode:
        existing = build.nodes.get(symbol)
        if isinstance(existing, RowNode):
            return existing

        entry = build.entries[symbol]
        oid = parse_oid(entry["oid"])
        columns = tuple(
            sorted(
                (column for column in build.columns if column.oid[:-1] == oid),
                key=lambda column: column.oid,
            )
        )

        if entry.get("indices"):
            index = tuple(self._resolve_node(build, ref) for ref in entry["indices"])
        elif entry.get("augmention"):
            augmented = self._resolve_node(build, entry["augmention"])
            if not isinstance(augmented, RowNode):
                raise LoadError(
                    build.name, f"row {symbol} augments {augmented.name}, which is not a row"
                )
            index = augmented.index
        else:
            index = ()

        row = RowNode(name=symbol, oid=oid, columns=columns, index=index)
        build.nodes[symbol] = row
        return row

    def _build_table(
        self, build: _ModuleBuild, symbol: str, entry: Dict[str, Any]
    ) -> TableNode:
        oid = parse_oid(entry["oid"])
        for row_symbol, row_entry in build.entries.items():
            if row_entry.get("nodetype") != "row":
                continue
            if parse_oid(row_entry["oid"])[:-1] == oid:
                return TableNode(
                    name=symbol, oid=oid, row=self._build_row(build, row_symbol)
                )
        raise LoadError(build.name, f"table {symbol} has no row")

    def _resolve_node(self, build: _ModuleBuild, ref: Dict[str, Any]) -> Node:
        """Resolve a ``{"module": ..., "object": ...}`` reference."""
        module_name = ref.get("module") or build.name
        object_name = ref.get("object") or ref.get("name")

        if module_name == build.name:
            node = build.nodes.get(object_name)
            if node is None and object_name in build.entries:
                if build.entries[object_name].get("nodetype") == "row":
                    node = self._build_row(build, object_name)
        else:
            node = self._nodes.get(module_name, {}).get(object_name)

        if node is None:
            raise LoadError(
                build.name, f"cannot resolve {module_name}::{object_name}"
            )
        return node

    def _node_type(self, module_name: str, entry: Dict[str, Any]) -> Type:
        node_type = self._type_from_syntax(module_name, entry.get("syntax") or {})
        units = entry.get("units")
        if units:
            node_type = dataclasses.replace(node_type, units=units)
        return node_type

    def _type_from_syntax(
        self, module_name: str, syntax: Dict[str, Any], depth: int = 0
    ) -> Type:
        type_name = syntax.get("type") or ""
        constraints = syntax.get("constraints") or {}

        if type_name in SMI_BASE_TYPES:
            primitive, base_kind = SMI_BASE_TYPES[type_name]
            enum = _enumeration(syntax)
            if enum is not None:
                primitive, base_kind = (
                    ("Bits", BaseKind.BITS)
                    if enum.base_kind == BaseKind.BITS
                    else ("Enumeration", BaseKind.ENUM)
                )
            return Type(
                name=primitive,
                base_kind=base_kind,
                enum=enum,
                ranges=_ranges(constraints, base_kind),
            )

        if type_name in APPLICATION_TYPES:
            base_kind = APPLICATION_TYPES[type_name]
            return Type(
                name=type_name,
                base_kind=base_kind,
                ranges=_ranges(constraints, base_kind),
            )

        found = self._lookup_type(module_name, type_name)
        if found is None or depth >= MAX_TYPE_DEPTH:
            logger.warning("Module %s: cannot resolve type %s", module_name, type_name)
            return Type(name=type_name, base_kind=BaseKind.UNKNOWN)

        owner, entry = found
        parent = self._type_from_syntax(owner, entry["type"], depth + 1)
        return Type(
            name=type_name,
            base_kind=parent.base_kind,
            enum=_enumeration(syntax) or parent.enum,
            ranges=_ranges(constraints, parent.base_kind) or parent.ranges,
            format=entry.get("displayhint") or parent.format,
        )

    def _lookup_type(
        self, module_name: str, type_name: str
    ) -> Optional[Tuple[str, Dict[str, Any]]]:
        document = self._documents.get(module_name, {})
        if _is_type_entry(document.get(type_name)):
            return module_name, document[type_name]

        for imported, names in _imports(document).items():
            if type_name not in names:
                continue
            entry = self._documents.get(imported, {}).get(type_name)
            if _is_type_entry(entry):
                return imported, entry

        for other, other_document in self._documents.items():
            if _is_type_entry(other_document.get(type_name)):
                return other, other_document[type_name]

        return None
