"""
Generator interface and the generation run.

A run visits modules in load order, hands each generated unit to the output
router, then writes the types collected in the run's registry once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...logging_config import get_logger
from ...smi.models import ELIGIBLE_KINDS, BaseKind, ColumnNode, Module, ScalarNode, Type
from .config import GeneratorConfig
from .templates import TemplateEngine, TemplateError, create_template_engine
from .type_registry import RegistryError, TypeRegistry

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class FormatError(GeneratorError):
    """Generated source could not be canonicalized.

    ``source`` keeps the unformatted text so it can still be written out.
    """

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class OutputError(GeneratorError):
    """A destination could not be opened or written."""

    pass


class CodeGenerator(ABC):
    """One target language: declarations per module, shared types, header."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self.template_engine: TemplateEngine = create_template_engine(
            self.get_template_directory()
        )

    @property
    @abstractmethod
    def language_name(self) -> str:
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        pass

    def get_template_directory(self) -> Optional[Path]:
        """Directory of the generator's templates; None for in-memory only."""
        return None

    @abstractmethod
    def generate_module(self, module: Module, registry: TypeRegistry) -> str:
        """
        Declarations for one module, registering its non-primitive types.

        Returns an empty string when the module has no eligible nodes.
        """

    @abstractmethod
    def generate_types(self, types: Sequence[Tuple[str, Type]]) -> str:
        """One declaration per flushed registry entry, in the given order."""

    @abstractmethod
    def render_header(self) -> str:
        """Text written once at the top of each output file."""

    @abstractmethod
    def type_reference_name(self, type_name: str) -> str:
        """Identifier used in generated code to refer to a registered type."""

    @abstractmethod
    def format_code(self, code: str) -> str:
        """
        Canonicalize generated code.

        Raises:
            FormatError: If the code cannot be formatted
        """

    def output_filename(self, module_name: str) -> str:
        return module_name.lower() + self.file_extension

    @property
    def types_filename(self) -> str:
        return "types" + self.file_extension

    def create_type_registry(self) -> TypeRegistry:
        return TypeRegistry(
            strict=self.config.strict_types,
            reference_namer=self.type_reference_name,
        )

    def validate_modules(self, modules: Sequence[Module]) -> List[str]:
        """Warnings about modules that will be skipped or carry unresolved types."""
        warnings = []
        for module in modules:
            nodes = module.get_nodes(ELIGIBLE_KINDS)
            if not nodes:
                warnings.append(f"Module {module.name} has no eligible nodes - will be skipped")

            for node in nodes:
                if not isinstance(node, (ScalarNode, ColumnNode)):
                    continue
                if node.type is None or node.type.base_kind == BaseKind.UNKNOWN:
                    type_name = node.type.name if node.type else "?"
                    warnings.append(f"Unknown type {type_name} in {module.name}.{node.name}")
        return warnings

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)


@dataclass
class GenerationResult:
    """Outcome of a run. ``destinations`` lists where each unit went, in write order."""

    destinations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error_message: Optional[str] = None
    exception: Optional[Exception] = None


def generate_code(
    generator: CodeGenerator,
    modules: Sequence[Module],
    router,
    registry: Optional[TypeRegistry] = None,
) -> GenerationResult:
    """
    Run ``generator`` over ``modules``, writing through ``router``.

    The first error stops the run. Whatever was written before it stays
    written and is listed in the result.
    """
    if registry is None:
        registry = generator.create_type_registry()

    result = GenerationResult(
        warnings=generator.validate_modules(modules),
        metadata={
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "module_count": len(modules),
            "modules_written": [],
            "modules_skipped": [],
            "type_count": 0,
        },
    )
    metadata = result.metadata

    try:
        with router:
            for module in modules:
                code = generator.generate_module(module, registry)
                if code:
                    router.write_module(module.name, code)
                    metadata["modules_written"].append(module.name)
                else:
                    logger.info("Module %s: Skipping empty module", module.name)
                    metadata["modules_skipped"].append(module.name)

            types = registry.flush()
            metadata["type_count"] = len(types)
            router.write_types(generator.generate_types(types))
    except (GeneratorError, RegistryError, TemplateError) as e:
        logger.error("Code generation failed: %s", e)
        result.success = False
        result.error_message = f"Code generation failed: {e}"
        result.exception = e

    result.destinations = list(router.destinations)
    return result
