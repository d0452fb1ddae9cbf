from __future__ import annotations

from typing import Iterable

from .layout_types import Field, LayoutRegistry, RecordInfo, TypeId


ANON_FIELD_NAME = "_"


def render_field(field: Field) -> str:
    name = field.name if field.name is not None else ANON_FIELD_NAME
    text = f"{name}: {field.type_id}"
    if field.bit_field_width is not None:
        text += f"({field.bit_field_width})"
    if field.offset is not None:
        text += f" @ {field.offset}"
    return text


def render_record(info: RecordInfo) -> str:
    fields = ", ".join(render_field(field) for field in info.fields)
    return f"{info.type_id}[{info.size}] {info.kind} {{ {fields} }}"


def render_layout(registry: LayoutRegistry, order: Iterable[TypeId]) -> str:
    lines = [render_record(registry.records[type_id]) for type_id in order]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def render_registry_dump(registry: LayoutRegistry) -> str:
    """Every discovered record with its aliases, in discovery order."""
    lines: list[str] = []
    for info in registry.records.values():
        aliases = ", ".join(info.sorted_aliases())
        lines.append(f"{render_record(info)}  /* aliases: {aliases} */")
    return "\n".join(lines) + "\n"
