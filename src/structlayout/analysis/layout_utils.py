from __future__ import annotations

from typing import Optional

from clang.cindex import CursorKind, TypeKind

from .layout_types import RecordKind, TypeId


RECORD_CURSOR_KINDS = {
    CursorKind.STRUCT_DECL: RecordKind.STRUCT,
    CursorKind.UNION_DECL: RecordKind.UNION,
    CursorKind.ENUM_DECL: RecordKind.ENUM,
}

FIELD_CURSOR_KINDS = {
    CursorKind.FIELD_DECL,
    CursorKind.ENUM_CONSTANT_DECL,
    CursorKind.UNION_DECL,
    CursorKind.STRUCT_DECL,
}

# Newer libclang spells unnamed tags as "struct (unnamed at foo.h:3:9)".
_UNNAMED_MARKERS = ("(unnamed", "(anonymous")


def type_id_of(clang_type) -> TypeId:
    return TypeId(clang_type.get_canonical().spelling)


def underlying_type(clang_type):
    """Strip every pointer/reference level, then canonicalize."""
    current = clang_type
    while True:
        pointee = current.get_pointee()
        if pointee is None or pointee.kind == TypeKind.INVALID:
            break
        current = pointee
    return current.get_canonical()


def is_valid_type(clang_type) -> bool:
    return clang_type is not None and clang_type.kind != TypeKind.INVALID


def cursor_name(cursor) -> Optional[str]:
    name = cursor.spelling
    if not name:
        return None
    if cursor.kind in RECORD_CURSOR_KINDS:
        if cursor.is_anonymous() or any(marker in name for marker in _UNNAMED_MARKERS):
            return None
    return name


def layout_query(value: Optional[int]) -> Optional[int]:
    # libclang reports layout failures as negative CXTypeLayoutError codes.
    if value is None or value < 0:
        return None
    return value
