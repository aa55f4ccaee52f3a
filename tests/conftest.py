from __future__ import annotations

import pytest

from hdrgen import HeaderEngine, Kind


@pytest.fixture
def engine() -> HeaderEngine:
    return HeaderEngine()


@pytest.fixture
def libc_engine() -> HeaderEngine:
    """size_t in three headers, wchar_t in two, plus a prototype depending on size_t."""
    engine = HeaderEngine()
    engine.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned long size_t;")
    engine.register_declaration("wchar_t", Kind.TYPEDEF, "typedef int wchar_t;")
    engine.register_declaration("NULL", Kind.MACRO, "#define NULL ((void *)0)")
    engine.register_declaration(
        "memcpy",
        Kind.PROTOTYPE,
        "void *memcpy(void *restrict, const void *restrict, size_t);",
        ["size_t"],
    )
    for header in ("stddef", "string", "wchar"):
        engine.register_header(header)
    for header in ("stddef", "string", "wchar"):
        engine.assign(header, "size_t")
    for header in ("stddef", "wchar"):
        engine.assign(header, "wchar_t")
    return engine
