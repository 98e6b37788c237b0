"""
Identifier formatting for generated declarations.

Pure string transforms from schema names to host-language identifiers.
Schema names are unique within their scope, so no collision handling
is done here.
"""

MODULE_NAME_DELIMITER = "-"
MODULE_VAR_SUFFIX = "Module"
NODE_VAR_SUFFIX = "Node"
TYPE_VAR_SUFFIX = "Type"


def _upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def _lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def format_module_name(module_name: str) -> str:
    """
    Format a module name as a capitalized-segment identifier.

    Each ``-`` separated segment gets an upper-case first character and a
    lower-case remainder: ``IF-MIB`` becomes ``IfMib``.
    """
    return "".join(
        part[:1].upper() + part[1:].lower()
        for part in module_name.split(MODULE_NAME_DELIMITER)
    )


def format_module_var_name(module_name: str) -> str:
    """``IF-MIB`` becomes ``ifMibModule``."""
    return _lower_first(format_module_name(module_name)) + MODULE_VAR_SUFFIX


def format_node_name(node_name: str) -> str:
    """``ifNumber`` becomes ``IfNumber``."""
    return _upper_first(node_name)


def format_node_var_name(node_name: str) -> str:
    """``ifNumber`` becomes ``ifNumberNode``."""
    return _lower_first(node_name) + NODE_VAR_SUFFIX


def format_type_var_name(type_name: str) -> str:
    """``RowStatus`` becomes ``RowStatusType``."""
    return format_node_name(type_name) + TYPE_VAR_SUFFIX
