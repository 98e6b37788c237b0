"""
Deduplicating store for named, non-primitive types.

One registry is created per run and passed to every generator call.
The first type registered under a name is kept; the full type bodies
are emitted once, in name order, when the registry is flushed.
"""

from typing import Callable, Dict, List, Optional, Tuple

from ...logging_config import get_logger
from ...smi.models import Type
from .naming import format_type_var_name

logger = get_logger(__name__)

# Types inlined at every use site instead of being registered
PRIMITIVE_TYPE_NAMES = frozenset(
    {
        "Integer32",
        "OctetString",
        "ObjectIdentifier",
        "Unsigned32",
        "Integer64",
        "Unsigned64",
        "Enumeration",
        "Bits",
    }
)


class RegistryError(Exception):
    """Exception raised for invalid registry usage."""

    pass


class TypeConflictError(RegistryError):
    """Two different types were registered under the same name."""

    def __init__(self, name: str, existing: Type, incoming: Type):
        super().__init__(
            f"Type {name} registered with conflicting definitions: "
            f"{existing!r} != {incoming!r}"
        )
        self.name = name
        self.existing = existing
        self.incoming = incoming


def is_primitive(type_: Type) -> bool:
    return type_.name in PRIMITIVE_TYPE_NAMES


class TypeRegistry:
    """Registry of named types shared across all generated modules."""

    def __init__(
        self,
        strict: bool = False,
        reference_namer: Optional[Callable[[str], str]] = None,
    ):
        """
        Initialize an empty registry.

        Args:
            strict: Raise TypeConflictError when a name is registered again
                with a different definition instead of keeping the first one
            reference_namer: Maps a type name to the identifier used to
                reference it from generated code
        """
        self.strict = strict
        self.reference_namer = reference_namer or format_type_var_name
        self._types: Dict[str, Type] = {}
        self._flushed = False

    def get_or_register(self, type_: Type) -> Tuple[str, bool]:
        """
        Return the reference name for a type, registering it on first use.

        Returns:
            Tuple of (reference name, whether the type was newly registered)

        Raises:
            RegistryError: If the registry was already flushed
            TypeConflictError: In strict mode, on a same-named type with a different shape
        """
        if self._flushed:
            raise RegistryError(f"Cannot register type {type_.name} after flush")

        reference = self.reference_namer(type_.name)
        existing = self._types.get(type_.name)
        if existing is None:
            self._types[type_.name] = type_
            logger.debug("Registered type %s", type_.name)
            return reference, True

        if existing != type_:
            if self.strict:
                raise TypeConflictError(type_.name, existing, type_)
            logger.warning(
                "Type %s seen again with a different definition, keeping the first",
                type_.name,
            )

        return reference, False

    def flush(self) -> List[Tuple[str, Type]]:
        """
        Return every registered type sorted by name. Can be called once.

        Raises:
            RegistryError: If the registry was already flushed
        """
        if self._flushed:
            raise RegistryError("Type registry already flushed")

        self._flushed = True
        return sorted(self._types.items())

    @property
    def flushed(self) -> bool:
        return self._flushed

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)
