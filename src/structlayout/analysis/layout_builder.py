from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from clang.cindex import CursorKind

from .layout_types import Field, LayoutRegistry, RecordInfo
from .layout_utils import (
    FIELD_CURSOR_KINDS,
    RECORD_CURSOR_KINDS,
    cursor_name,
    is_valid_type,
    layout_query,
    type_id_of,
    underlying_type,
)


log = logging.getLogger(__name__)


def _is_record_definition(cursor) -> bool:
    return cursor.kind in RECORD_CURSOR_KINDS and cursor.is_definition()


def find_record_def(node) -> Optional[tuple[object, str]]:
    """Return (record cursor, name) if ``node`` introduces a record definition.

    Typedefs wrapping an inline definition lift it under the typedef name, so
    ``typedef struct { ... } Foo;`` becomes reachable as ``Foo``.
    """
    if _is_record_definition(node):
        name = cursor_name(node)
        if name is None:
            if not is_valid_type(node.type):
                return None
            name = str(type_id_of(node.type))
        return node, name
    if node.kind == CursorKind.TYPEDEF_DECL:
        for child in node.get_children():
            if _is_record_definition(child):
                name = node.spelling
                if not name:
                    return None
                return child, name
    return None


def iter_preorder(root) -> Iterator[object]:
    """Yield every descendant of ``root`` (not ``root`` itself) in pre-order."""
    stack = list(reversed(list(root.get_children())))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(node.get_children())))


class RegistryBuilder:
    def __init__(self, name_filters: Iterable[str]) -> None:
        self.name_filters = set(name_filters)
        self.registry = LayoutRegistry()

    def visit(self, root) -> LayoutRegistry:
        for node in iter_preorder(root):
            found = find_record_def(node)
            if found is None:
                continue
            record_cursor, name = found
            log.debug("FOUND: %s", name)
            self.add_record(record_cursor, name)
        return self.registry

    def add_record(self, cursor, name: str) -> Optional[RecordInfo]:
        record_type = cursor.type
        if not is_valid_type(record_type):
            log.debug("skip %s: no type", name)
            return None
        size = layout_query(record_type.get_size())
        if size is None:
            log.debug("skip %s: size unavailable", name)
            return None
        type_id = type_id_of(record_type)
        kind = RECORD_CURSOR_KINDS[cursor.kind]

        info = self.registry.records.get(type_id)
        if info is None:
            info = RecordInfo(
                kind=kind,
                type_id=type_id,
                size=size,
                fields=self._build_fields(cursor, record_type),
            )
            self.registry.records[type_id] = info
        elif info.kind != kind or info.size != size:
            log.warning(
                "conflicting definition of %s via %s (%s, %d bytes); keeping first (%s, %d bytes)",
                type_id,
                name,
                kind,
                size,
                info.kind,
                info.size,
            )

        if name in self.name_filters:
            self.registry.targets.add(type_id)
        info.aliases.add(name)
        return info

    def _build_fields(self, cursor, record_type) -> list[Field]:
        fields: list[Field] = []
        for child in cursor.get_children():
            if child.kind not in FIELD_CURSOR_KINDS:
                continue
            field_type = child.type
            if not is_valid_type(field_type):
                log.debug("skip member %s of %s: no type", child.spelling, record_type.spelling)
                continue
            name = cursor_name(child)
            bit_field_width = None
            if child.kind == CursorKind.FIELD_DECL and child.is_bitfield():
                bit_field_width = layout_query(child.get_bitfield_width())
            fields.append(
                Field(
                    name=name,
                    type_id=type_id_of(field_type),
                    underlying=type_id_of(underlying_type(field_type)),
                    offset=self._member_offset(child, name, record_type),
                    bit_field_width=bit_field_width,
                )
            )
        return fields

    def _member_offset(self, child, name: Optional[str], record_type) -> Optional[int]:
        if name is not None:
            offset = layout_query(record_type.get_offset(name))
            if offset is not None:
                return offset
        if child.kind == CursorKind.ENUM_CONSTANT_DECL:
            return child.enum_value
        return None


def build_registry(root, name_filters: Iterable[str]) -> LayoutRegistry:
    return RegistryBuilder(name_filters).visit(root)
