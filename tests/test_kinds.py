"""Tests for hdrgen.kinds."""

from __future__ import annotations

from hdrgen.kinds import is_identifier, macro_body, macro_name, prototype_body, typedef_body, validate_body
from hdrgen.models import Kind, Variadic


def test_typedef_body() -> None:
    assert typedef_body("size_t", "unsigned long") == "typedef unsigned long size_t;"
    assert typedef_body("va_list", "char *") == "typedef char *va_list;"


def test_macro_body_and_name() -> None:
    assert macro_body("NULL", "((void *)0)") == "#define NULL ((void *)0)"
    assert macro_body("__STDC_VERSION_STDDEF_H__") == "#define __STDC_VERSION_STDDEF_H__"
    assert macro_name("offsetof(type, member)") == "offsetof"


def test_prototype_body_variants() -> None:
    assert (
        prototype_body("void *", "memcpy", ["void *restrict", "const void *restrict", "size_t"])
        == "void *memcpy(void *restrict, const void *restrict, size_t);"
    )
    assert prototype_body("int", "rand") == "int rand(void);"
    assert (
        prototype_body("int", "printf", ["const char *restrict"], Variadic.VARIADIC)
        == "int printf(const char *restrict, ...);"
    )
    assert prototype_body("int", "legacy", [], Variadic.VARIADIC) == "int legacy(...);"


def test_is_identifier() -> None:
    assert is_identifier("_Bool")
    assert not is_identifier("9lives")
    assert not is_identifier("struct tm")


def test_validate_body_accepts_each_kind() -> None:
    assert validate_body(Kind.TYPEDEF, "size_t", "typedef unsigned long size_t;") is None
    assert validate_body(Kind.MACRO, "offsetof", "#define offsetof(t, m) __builtin_offsetof(t, m)") is None
    assert validate_body(Kind.STRUCT, "tm", "struct tm {\n    int tm_sec;\n};") is None
    assert validate_body(Kind.STRUCT, "sigval", "union sigval {\n    int sival_int;\n};") is None
    assert validate_body(Kind.ENUM, "memory_order", "typedef enum memory_order { memory_order_relaxed } memory_order;") is None
    assert validate_body(Kind.PROTOTYPE, "abort", "_Noreturn void abort(void);") is None


def test_validate_body_reports_problems() -> None:
    assert validate_body(Kind.TYPEDEF, "size_t", "") == "body is empty"
    assert validate_body(Kind.TYPEDEF, "size_t", "unsigned long size_t;") is not None
    assert validate_body(Kind.MACRO, "NULL", "#define NULLPTR 0 /* NULL */") is not None
    assert validate_body(Kind.ENUM, "color", "struct color;") is not None
    assert validate_body(Kind.PROTOTYPE, "abort", "void (*abort)") is not None
