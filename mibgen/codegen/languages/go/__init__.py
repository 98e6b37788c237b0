"""
Go code generator module.

Generates gosmi model declarations from loaded MIB modules.
"""

from .generator import GoGenerator
from .formatter import GoFormatter
from .naming import validate_go_package_name

__all__ = [
    "GoGenerator",
    "GoFormatter",
    "validate_go_package_name",
]
