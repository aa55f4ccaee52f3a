"""Tests for hdrgen.engine."""

from __future__ import annotations

import pytest

from hdrgen import (
    CycleError,
    DuplicateNameError,
    HeaderEngine,
    InconsistentDeclarationError,
    Kind,
    MissingAssignmentError,
    MissingDependencyError,
    UnknownDeclarationError,
    UnknownHeaderError,
    ValidationErrors,
)


def test_scenario_shared_size_t_and_wchar_t(libc_engine: HeaderEngine) -> None:
    stddef = libc_engine.emit("stddef")
    string = libc_engine.emit("string")
    wchar = libc_engine.emit("wchar")

    size_block = (
        "#ifndef __typedef_size_t_defined\n#define __typedef_size_t_defined\n"
        "typedef unsigned long size_t;\n#endif\n"
    )
    wchar_block = (
        "#ifndef __typedef_wchar_t_defined\n#define __typedef_wchar_t_defined\n"
        "typedef int wchar_t;\n#endif\n"
    )
    assert size_block in stddef and size_block in wchar and size_block in string
    assert wchar_block in stddef and wchar_block in wchar
    assert "wchar_t" not in string
    guards = {libc_engine.header_guard(name) for name in ("stddef", "string", "wchar")}
    assert guards == {"_STDDEF_H", "_STRING_H", "_WCHAR_H"}


def test_emit_pulls_dependencies_into_the_header(libc_engine: HeaderEngine) -> None:
    libc_engine.assign("string", "memcpy")

    assert libc_engine.closure("string") == ["size_t", "memcpy"]
    text = libc_engine.emit("string")
    assert text.index("typedef unsigned long size_t;") < text.index("void *memcpy(")


def test_emit_unknown_header_raises(libc_engine: HeaderEngine) -> None:
    with pytest.raises(UnknownHeaderError):
        libc_engine.emit("stdio")


def test_cycle_rejection_reports_both_names(engine: HeaderEngine) -> None:
    engine.register_declaration("A", Kind.MACRO, "#define A B", ["B"])
    engine.register_declaration("B", Kind.MACRO, "#define B A", ["A"])
    engine.register_header("loop.h")
    engine.assign("loop.h", "A")
    engine.assign("loop.h", "B")

    with pytest.raises(ValidationErrors) as excinfo:
        engine.validate()

    (cycle,) = excinfo.value.of_type(CycleError)
    assert set(cycle.names) == {"A", "B"}


def test_cycles_are_found_before_assignment(engine: HeaderEngine) -> None:
    engine.register_declaration("A", Kind.MACRO, "#define A B", ["B"])
    engine.register_declaration("B", Kind.MACRO, "#define B A", ["A"])

    with pytest.raises(ValidationErrors):
        engine.validate()


def test_conflict_rejection(engine: HeaderEngine) -> None:
    engine.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned long size_t;", [])

    with pytest.raises(DuplicateNameError):
        engine.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned int size_t;", [])


def test_emit_is_all_or_nothing(libc_engine: HeaderEngine) -> None:
    libc_engine.register_declaration("wint_t", Kind.TYPEDEF, "typedef unsigned wint_t;", ["wctrans_t"])

    with pytest.raises(ValidationErrors) as excinfo:
        libc_engine.emit("stddef")
    with pytest.raises(ValidationErrors):
        libc_engine.emit_all()

    assert isinstance(excinfo.value.errors[0], MissingDependencyError)
    assert "wctrans_t" in str(excinfo.value)


def test_validate_aggregates_every_problem(engine: HeaderEngine) -> None:
    engine.register_declaration("A", Kind.MACRO, "#define A B", ["B"])
    engine.register_declaration("B", Kind.MACRO, "#define B A", ["A"])
    engine.register_declaration("C", Kind.MACRO, "#define C C", ["C"])
    engine.register_declaration("D", Kind.MACRO, "#define D E", ["E"])

    with pytest.raises(ValidationErrors) as excinfo:
        engine.validate()

    assert [type(error) for error in excinfo.value.errors] == [CycleError, CycleError, MissingDependencyError]


def test_mutation_between_registration_and_emission_is_detected(libc_engine: HeaderEngine) -> None:
    declaration = libc_engine.registry.lookup("wchar_t")
    object.__setattr__(declaration, "body", "typedef long wchar_t;")

    with pytest.raises(ValidationErrors) as excinfo:
        libc_engine.emit("wchar")

    assert isinstance(excinfo.value.errors[0], InconsistentDeclarationError)


def test_replace_propagates_to_every_header(libc_engine: HeaderEngine) -> None:
    libc_engine.replace_declaration("size_t", Kind.TYPEDEF, "typedef unsigned long long size_t;")

    rendered = libc_engine.emit_all()

    for name in ("stddef", "string", "wchar"):
        assert "typedef unsigned long long size_t;" in rendered[name]
        assert "typedef unsigned long size_t;" not in rendered[name]


def test_emit_all_preserves_header_registration_order(libc_engine: HeaderEngine) -> None:
    assert list(libc_engine.emit_all()) == ["stddef", "string", "wchar"]


def test_sentinel_lookup(libc_engine: HeaderEngine) -> None:
    assert libc_engine.sentinel("NULL") == "__macro_NULL_defined"
    with pytest.raises(UnknownDeclarationError):
        libc_engine.sentinel("EOF")


def test_strict_policy_engine() -> None:
    engine = HeaderEngine(dependency_policy="strict")
    engine.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned long size_t;")
    engine.register_declaration("strlen", Kind.PROTOTYPE, "size_t strlen(const char *);", ["size_t"])
    engine.register_header("string.h")
    engine.assign("string.h", "strlen")

    with pytest.raises(ValidationErrors) as excinfo:
        engine.emit("string.h")
    assert isinstance(excinfo.value.errors[0], MissingAssignmentError)

    engine.assign("string.h", "size_t")
    assert engine.closure("string.h") == ["size_t", "strlen"]


def test_engines_do_not_share_state() -> None:
    first = HeaderEngine()
    second = HeaderEngine()
    first.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned long size_t;")

    second.register_declaration("size_t", Kind.TYPEDEF, "typedef unsigned int size_t;")

    assert first.registry.lookup("size_t").body != second.registry.lookup("size_t").body


def _count_full_checks(engine: HeaderEngine, monkeypatch: pytest.MonkeyPatch) -> list:
    calls = []
    check = engine.checker.check

    def counting_check():
        calls.append(1)
        return check()

    monkeypatch.setattr(engine.checker, "check", counting_check)
    return calls


def test_unchanged_engine_skips_full_revalidation(
    libc_engine: HeaderEngine, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls = _count_full_checks(libc_engine, monkeypatch)

    libc_engine.emit("stddef")
    libc_engine.emit("string")
    libc_engine.emit_all()
    assert len(calls) == 1

    libc_engine.register_declaration("ptrdiff_t", Kind.TYPEDEF, "typedef long ptrdiff_t;")
    libc_engine.emit("stddef")
    assert len(calls) == 2

    libc_engine.assign("stddef", "ptrdiff_t")
    libc_engine.emit("stddef")
    assert len(calls) == 3


def test_failed_validation_is_not_cached(engine: HeaderEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    engine.register_declaration("strlen", Kind.PROTOTYPE, "size_t strlen(const char *);", ["size_t"])
    engine.register_header("string.h")
    engine.assign("string.h", "strlen")
    calls = _count_full_checks(engine, monkeypatch)

    for _ in range(2):
        with pytest.raises(ValidationErrors):
            engine.emit("string.h")

    assert len(calls) == 2


def test_mutation_after_successful_validation_is_detected(libc_engine: HeaderEngine) -> None:
    libc_engine.validate()
    declaration = libc_engine.registry.lookup("size_t")
    object.__setattr__(declaration, "body", "typedef unsigned int size_t;")

    with pytest.raises(ValidationErrors) as excinfo:
        libc_engine.emit("string")

    assert [type(error) for error in excinfo.value.errors] == [InconsistentDeclarationError]
