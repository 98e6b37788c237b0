import json
from collections.abc import Callable
from pathlib import Path

import pytest

from mibgen.codegen.core.config import GeneratorConfig
from mibgen.codegen.core.type_registry import TypeRegistry
from mibgen.codegen.languages.go import GoGenerator
from mibgen.smi.models import (
    BaseKind,
    ColumnNode,
    Enumeration,
    Module,
    NamedNumber,
    NotificationNode,
    RowNode,
    ScalarNode,
    TableNode,
    Type,
)

ROW_STATUS_VALUES = {
    "active": 1,
    "notInService": 2,
    "notReady": 3,
    "createAndGo": 4,
    "createAndWait": 5,
    "destroy": 6,
}

SNMPV2_TC = {
    "imports": {"class": "imports", "SNMPv2-SMI": ["TimeTicks"]},
    "RowStatus": {
        "name": "RowStatus",
        "class": "textualconvention",
        "type": {
            "type": "INTEGER",
            "constraints": {"enumeration": ROW_STATUS_VALUES},
        },
    },
    "DisplayString": {
        "name": "DisplayString",
        "class": "textualconvention",
        "displayhint": "255a",
        "type": {
            "type": "OCTET STRING",
            "constraints": {"size": [{"min": 0, "max": 255}]},
        },
    },
}

IF_MIB = {
    "imports": {
        "class": "imports",
        "SNMPv2-SMI": ["Integer32", "mib-2"],
        "SNMPv2-TC": ["RowStatus", "DisplayString"],
    },
    "ifMIB": {"name": "ifMIB", "oid": "1.3.6.1.2.1.31", "class": "moduleidentity"},
    "ifNumber": {
        "name": "ifNumber",
        "oid": "1.3.6.1.2.1.2.1",
        "nodetype": "scalar",
        "class": "objecttype",
        "syntax": {"type": "Integer32", "class": "type"},
        "maxaccess": "read-only",
    },
    "ifTable": {
        "name": "ifTable",
        "oid": "1.3.6.1.2.1.2.2",
        "nodetype": "table",
        "class": "objecttype",
        "maxaccess": "not-accessible",
    },
    "ifEntry": {
        "name": "ifEntry",
        "oid": "1.3.6.1.2.1.2.2.1",
        "nodetype": "row",
        "class": "objecttype",
        "indices": [{"module": "IF-MIB", "object": "ifIndex", "implied": 0}],
    },
    "ifIndex": {
        "name": "ifIndex",
        "oid": "1.3.6.1.2.1.2.2.1.1",
        "nodetype": "column",
        "class": "objecttype",
        "syntax": {
            "type": "Integer32",
            "class": "type",
            "constraints": {"range": [{"min": 1, "max": 2147483647}]},
        },
    },
    "ifDescr": {
        "name": "ifDescr",
        "oid": "1.3.6.1.2.1.2.2.1.2",
        "nodetype": "column",
        "class": "objecttype",
        "syntax": {"type": "DisplayString", "class": "type"},
    },
    "ifRowStatus": {
        "name": "ifRowStatus",
        "oid": "1.3.6.1.2.1.2.2.1.3",
        "nodetype": "column",
        "class": "objecttype",
        "syntax": {"type": "RowStatus", "class": "type"},
    },
    "linkDown": {
        "name": "linkDown",
        "oid": "1.3.6.1.6.3.1.1.5.3",
        "class": "notificationtype",
        "objects": [
            {"module": "IF-MIB", "object": "ifIndex"},
            {"module": "IF-MIB", "object": "ifNumber"},
        ],
    },
}

OTHER_MIB = {
    "imports": {
        "class": "imports",
        "SNMPv2-SMI": ["Counter32", "enterprises"],
        "SNMPv2-TC": ["RowStatus"],
        "IF-MIB": ["ifEntry"],
    },
    "otherStatus": {
        "name": "otherStatus",
        "oid": "1.3.6.1.4.1.9999.1",
        "nodetype": "scalar",
        "class": "objecttype",
        "syntax": {"type": "RowStatus", "class": "type"},
    },
    "otherTable": {
        "name": "otherTable",
        "oid": "1.3.6.1.4.1.9999.2",
        "nodetype": "table",
        "class": "objecttype",
    },
    "otherEntry": {
        "name": "otherEntry",
        "oid": "1.3.6.1.4.1.9999.2.1",
        "nodetype": "row",
        "class": "objecttype",
        "augmention": {"name": "ifEntry", "module": "IF-MIB", "object": "ifEntry"},
    },
    "otherPackets": {
        "name": "otherPackets",
        "oid": "1.3.6.1.4.1.9999.2.1.1",
        "nodetype": "column",
        "class": "objecttype",
        "syntax": {"type": "Counter32", "class": "type"},
        "units": "packets",
    },
}

EMPTY_MIB = {
    "imports": {"class": "imports", "SNMPv2-SMI": ["enterprises"]},
}

BROKEN_IMPORT_MIB = {
    "imports": {"class": "imports", "NOPE-MIB": ["Something"]},
    "brokenValue": {
        "name": "brokenValue",
        "oid": "1.3.6.1.4.1.9998.1",
        "nodetype": "scalar",
        "class": "objecttype",
        "syntax": {"type": "Integer32", "class": "type"},
    },
}


@pytest.fixture
def mib_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "mibs"
    directory.mkdir()
    documents = {
        "SNMPv2-TC": SNMPV2_TC,
        "IF-MIB": IF_MIB,
        "OTHER-MIB": OTHER_MIB,
        "EMPTY-MIB": EMPTY_MIB,
        "BROKEN-IMPORT-MIB": BROKEN_IMPORT_MIB,
    }
    for name, document in documents.items():
        (directory / f"{name}.json").write_text(json.dumps(document), encoding="utf-8")
    (directory / "CORRUPT-MIB.json").write_text("{not json", encoding="utf-8")
    return directory


@pytest.fixture
def generator() -> GoGenerator:
    return GoGenerator(GeneratorConfig(formatter="builtin"))


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry()


@pytest.fixture
def integer32() -> Type:
    return Type(name="Integer32", base_kind=BaseKind.INTEGER32)


@pytest.fixture
def row_status() -> Type:
    return Type(
        name="RowStatus",
        base_kind=BaseKind.ENUM,
        enum=Enumeration(
            BaseKind.ENUM,
            tuple(NamedNumber(name, value) for name, value in ROW_STATUS_VALUES.items()),
        ),
    )


@pytest.fixture
def make_module() -> Callable[..., Module]:
    def _make_module(name: str, *nodes) -> Module:
        return Module(name=name, nodes=list(nodes))

    return _make_module


@pytest.fixture
def if_nodes(integer32: Type, row_status: Type) -> dict:
    """IF-MIB shaped nodes built directly, without the loader."""
    if_number = ScalarNode(name="ifNumber", oid=(1, 3, 6, 1, 2, 1, 2, 1), type=integer32)
    if_index = ColumnNode(
        name="ifIndex", oid=(1, 3, 6, 1, 2, 1, 2, 2, 1, 1), type=integer32
    )
    if_row_status = ColumnNode(
        name="ifRowStatus", oid=(1, 3, 6, 1, 2, 1, 2, 2, 1, 3), type=row_status
    )
    if_entry = RowNode(
        name="ifEntry",
        oid=(1, 3, 6, 1, 2, 1, 2, 2, 1),
        columns=(if_index, if_row_status),
        index=(if_index,),
    )
    if_table = TableNode(name="ifTable", oid=(1, 3, 6, 1, 2, 1, 2, 2), row=if_entry)
    link_down = NotificationNode(
        name="linkDown",
        oid=(1, 3, 6, 1, 6, 3, 1, 1, 5, 3),
        objects=(if_index, if_number),
    )
    return {
        "ifNumber": if_number,
        "ifTable": if_table,
        "ifEntry": if_entry,
        "ifIndex": if_index,
        "ifRowStatus": if_row_status,
        "linkDown": link_down,
    }
