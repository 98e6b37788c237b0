import dataclasses
import logging

import pytest

from mibgen.codegen.core.type_registry import (
    RegistryError,
    TypeConflictError,
    TypeRegistry,
    is_primitive,
)
from mibgen.smi.models import BaseKind, Type


def test_first_registration_is_new(registry: TypeRegistry, row_status: Type) -> None:
    assert registry.get_or_register(row_status) == ("RowStatusType", True)
    assert "RowStatus" in registry
    assert len(registry) == 1


def test_repeat_registration_is_deduplicated(
    registry: TypeRegistry, row_status: Type
) -> None:
    registry.get_or_register(row_status)

    assert registry.get_or_register(row_status) == ("RowStatusType", False)
    assert len(registry) == 1


def test_flush_returns_types_sorted_by_name(
    registry: TypeRegistry, row_status: Type
) -> None:
    display_string = Type(name="DisplayString", base_kind=BaseKind.OCTET_STRING)
    registry.get_or_register(row_status)
    registry.get_or_register(display_string)

    flushed = registry.flush()

    assert [name for name, _ in flushed] == ["DisplayString", "RowStatus"]
    assert flushed[1][1] is row_status
    assert registry.flushed


def test_flush_only_once(registry: TypeRegistry) -> None:
    registry.flush()

    with pytest.raises(RegistryError):
        registry.flush()


def test_register_after_flush_fails(registry: TypeRegistry, row_status: Type) -> None:
    registry.flush()

    with pytest.raises(RegistryError, match="after flush"):
        registry.get_or_register(row_status)


def test_conflict_keeps_first_definition(
    registry: TypeRegistry, row_status: Type, caplog: pytest.LogCaptureFixture
) -> None:
    other = dataclasses.replace(row_status, units="seconds")
    registry.get_or_register(row_status)

    with caplog.at_level(logging.WARNING):
        reference, is_new = registry.get_or_register(other)

    assert (reference, is_new) == ("RowStatusType", False)
    assert registry.flush() == [("RowStatus", row_status)]
    assert "different definition" in caplog.text


def test_conflict_raises_in_strict_mode(row_status: Type) -> None:
    registry = TypeRegistry(strict=True)
    registry.get_or_register(row_status)

    with pytest.raises(TypeConflictError) as excinfo:
        registry.get_or_register(dataclasses.replace(row_status, format="d"))

    assert excinfo.value.name == "RowStatus"


def test_custom_reference_namer(row_status: Type) -> None:
    registry = TypeRegistry(reference_namer=lambda name: f"T_{name}")

    assert registry.get_or_register(row_status) == ("T_RowStatus", True)


def test_is_primitive(integer32: Type, row_status: Type) -> None:
    assert is_primitive(integer32)
    assert is_primitive(Type(name="Enumeration", base_kind=BaseKind.ENUM))
    assert not is_primitive(row_status)
    assert not is_primitive(Type(name="Counter32", base_kind=BaseKind.UNSIGNED32))
