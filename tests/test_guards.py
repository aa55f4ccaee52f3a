"""Tests for hdrgen.guards."""

from __future__ import annotations

import pytest

from hdrgen.guards import GuardSynthesizer
from hdrgen.models import Declaration, Header, HeaderGuard, Kind


@pytest.mark.parametrize(
    ("identifier", "expected"),
    [
        ("stddef", "_STDDEF_H"),
        ("stddef.h", "_STDDEF_H"),
        ("sys/types.h", "_SYS_TYPES_H"),
        ("bits/c++config.hpp", "_BITS_C__CONFIG_H"),
        ("9p.h", "_9P_H"),
        (".h", "__H_H"),
    ],
)
def test_derive_header_guard(identifier: str, expected: str) -> None:
    assert GuardSynthesizer.derive_header_guard(identifier) == expected


def test_explicit_guard_overrides_derived_token() -> None:
    header = Header(name="assert.h", guard=HeaderGuard(token="_ASSERT_H", value="1"))

    assert GuardSynthesizer().header_guard(header) == "_ASSERT_H"


def test_sentinel_depends_only_on_kind_and_name() -> None:
    guards = GuardSynthesizer()
    first = Declaration("size_t", Kind.TYPEDEF, "typedef unsigned long size_t;")
    second = Declaration("size_t", Kind.TYPEDEF, "typedef unsigned int size_t;")

    assert guards.sentinel(first) == "__typedef_size_t_defined"
    assert guards.sentinel(first) == guards.sentinel(second)


def test_sentinel_is_salted_by_kind() -> None:
    guards = GuardSynthesizer()

    assert guards.sentinel_for(Kind.MACRO, "bool") == "__macro_bool_defined"
    assert guards.sentinel_for(Kind.TYPEDEF, "bool") != guards.sentinel_for(Kind.MACRO, "bool")


def test_sentinel_never_matches_a_header_guard() -> None:
    guards = GuardSynthesizer()
    sentinel = guards.sentinel_for(Kind.TYPEDEF, "STDDEF")

    assert sentinel != guards.derive_header_guard("stddef.h")
    assert sentinel.startswith("__typedef_")


def test_block_wraps_body_in_sentinel() -> None:
    declaration = Declaration("NULL", Kind.MACRO, "#define NULL ((void *)0)\n")

    assert GuardSynthesizer().block(declaration) == (
        "#ifndef __macro_NULL_defined\n"
        "#define __macro_NULL_defined\n"
        "#define NULL ((void *)0)\n"
        "#endif\n"
    )
