import pytest

from mibgen.codegen.core.naming import (
    format_module_name,
    format_module_var_name,
    format_node_name,
    format_node_var_name,
    format_type_var_name,
)


@pytest.mark.parametrize(
    ("module_name", "expected"),
    [
        ("IF-MIB", "IfMib"),
        ("SNMPv2-MIB", "Snmpv2Mib"),
        ("HOST-RESOURCES-MIB", "HostResourcesMib"),
        ("RFC1213-MIB", "Rfc1213Mib"),
        ("single", "Single"),
    ],
)
def test_format_module_name(module_name: str, expected: str) -> None:
    assert format_module_name(module_name) == expected


def test_format_module_var_name() -> None:
    assert format_module_var_name("IF-MIB") == "ifMibModule"
    assert format_module_var_name("SNMPv2-MIB") == "snmpv2MibModule"


def test_format_node_name_only_touches_first_character() -> None:
    assert format_node_name("ifNumber") == "IfNumber"
    assert format_node_name("ifHCInOctets") == "IfHCInOctets"
    assert format_node_name("") == ""


def test_format_node_var_name() -> None:
    assert format_node_var_name("ifNumber") == "ifNumberNode"
    assert format_node_var_name("IfX") == "ifXNode"


def test_format_type_var_name() -> None:
    assert format_type_var_name("RowStatus") == "RowStatusType"
    assert format_type_var_name("displayString") == "DisplayStringType"
