"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    FormatError,
    GenerationResult,
    GeneratorError,
    OutputError,
    generate_code,
)
from .declarations import (
    Cast,
    CompositeLit,
    ListExpr,
    Literal,
    Ref,
    StructDecl,
    StructField,
    VarDecl,
)
from .naming import (
    format_module_name,
    format_module_var_name,
    format_node_name,
    format_node_var_name,
    format_type_var_name,
)
from .type_registry import (
    PRIMITIVE_TYPE_NAMES,
    RegistryError,
    TypeConflictError,
    TypeRegistry,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "FormatError",
    "OutputError",
    "GenerationResult",
    "generate_code",
    # Declaration model
    "Cast",
    "CompositeLit",
    "ListExpr",
    "Literal",
    "Ref",
    "StructDecl",
    "StructField",
    "VarDecl",
    # Identifier formatting
    "format_module_name",
    "format_module_var_name",
    "format_node_name",
    "format_node_var_name",
    "format_type_var_name",
    # Type registry
    "PRIMITIVE_TYPE_NAMES",
    "RegistryError",
    "TypeConflictError",
    "TypeRegistry",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
