"""
mibgen code generation package.

Generates model declarations from loaded MIB modules.
"""

from typing import IO, Optional, Sequence

from .registry import (
    GeneratorRegistry,
    RegistryError as GeneratorRegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.config import GeneratorConfig, ConfigManager, load_config
from .writer import OutputRouter
from ..smi.models import Module


def generate_from_modules(
    modules: Sequence[Module],
    config: Optional[GeneratorConfig] = None,
    stdout: Optional[IO[str]] = None,
) -> GenerationResult:
    """
    Generate code for loaded modules.

    Args:
        modules: Modules in load order
        config: Generator configuration (defaults for Go if omitted)
        stdout: Stream used when the output file is "-"

    Returns:
        GenerationResult describing what was written

    Raises:
        ConfigError: If the configured formatter is unusable; nothing is written
    """
    config = config or load_config()
    generator = get_generator(config.language, config)
    router = OutputRouter.for_generator(
        generator,
        output=config.output_file,
        out_dir=config.output_dir,
        stdout=stdout,
    )
    return generate_code(generator, modules, router)


__all__ = [
    "GeneratorRegistry",
    "GeneratorRegistryError",
    "get_generator",
    "get_registry",
    "list_supported_languages",
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "OutputRouter",
    "generate_from_modules",
]
