"""
Target language registry.

Maps language names and aliases to generator classes so the CLI and the
pipeline can pick a generator from configuration.
"""

from typing import Dict, Iterable, List, Optional, Type

from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator


class RegistryError(Exception):
    """Unknown language, or an invalid or conflicting registration."""

    pass


class GeneratorRegistry:
    """Generator classes keyed by lower-cased language name."""

    def __init__(self):
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Iterable[str] = (),
    ):
        """
        Register a generator class under a language name and its aliases.

        Registering a language twice keeps the first class.

        Raises:
            RegistryError: If the class is not a CodeGenerator, or an alias
                is already taken by another language
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError(f"{generator_class!r} is not a CodeGenerator subclass")

        key = language.lower()
        if key in self._generators:
            return

        alias_keys = [alias.lower() for alias in aliases if alias.lower() != key]
        for alias in alias_keys:
            if alias in self._generators:
                raise RegistryError(f"Alias '{alias}' conflicts with existing primary language")
            owner = self._aliases.get(alias)
            if owner is not None and owner != key:
                raise RegistryError(f"Alias '{alias}' already points to '{owner}'")

        self._generators[key] = generator_class
        for alias in alias_keys:
            self._aliases[alias] = key

    def resolve(self, language: str) -> str:
        """
        Return the primary name for a language name or alias.

        Raises:
            RegistryError: If the language is not registered
        """
        key = language.lower()
        key = self._aliases.get(key, key)
        if key not in self._generators:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return key

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        return self._generators[self.resolve(language)]

    def create_generator(
        self, language: str, config: Optional[GeneratorConfig] = None
    ) -> CodeGenerator:
        """Instantiate the generator for a language, with its default config if none is given."""
        key = self.resolve(language)
        return self._generators[key](config or load_config(key))

    def list_languages(self) -> List[str]:
        return sorted(self._generators)

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._generators or key in self._aliases


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Return the process-wide registry with the bundled generators registered."""
    global _global_registry
    if _global_registry is None:
        from .languages.go import GoGenerator

        _global_registry = GeneratorRegistry()
        _global_registry.register("go", GoGenerator, aliases=["golang"])
    return _global_registry


def get_generator(
    language: str, config: Optional[GeneratorConfig] = None
) -> CodeGenerator:
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)
