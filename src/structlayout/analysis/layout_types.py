from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True, order=True)
class TypeId:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class Field:
    name: Optional[str]
    type_id: TypeId
    underlying: TypeId
    offset: Optional[int]
    bit_field_width: Optional[int] = None


class RecordKind(Enum):
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"

    def __str__(self) -> str:
        return self.value


@dataclass
class RecordInfo:
    kind: RecordKind
    type_id: TypeId
    size: int
    aliases: set[str] = field(default_factory=set)
    fields: list[Field] = field(default_factory=list)

    def sorted_aliases(self) -> list[str]:
        return sorted(self.aliases)


@dataclass
class LayoutRegistry:
    records: dict[TypeId, RecordInfo] = field(default_factory=dict)
    targets: set[TypeId] = field(default_factory=set)
