"""Checks for the Go package name written into generated headers."""

import re

GO_KEYWORDS = frozenset(
    """
    break case chan const continue default defer else fallthrough for func
    go goto if import interface map package range return select struct
    switch type var
    """.split()
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_go_package_name(name: str) -> list[str]:
    """Return the reasons ``name`` is a poor Go package name, if any."""
    if not name:
        return ["Package name cannot be empty"]

    problems = []
    if not _IDENTIFIER.match(name):
        problems.append(f"'{name}' is not a valid Go identifier")
    if name != name.lower():
        problems.append("Package names should be lowercase")
    if "_" in name:
        problems.append("Package names should not contain underscores")
    if name in GO_KEYWORDS:
        problems.append(f"'{name}' is a Go reserved word")
    return problems
