from __future__ import annotations

import logging
from typing import Iterable

from .layout_errors import NoTargetsError, NothingFoundError
from .layout_types import LayoutRegistry, RecordInfo, TypeId


log = logging.getLogger(__name__)


def select_targets(registry: LayoutRegistry) -> list[TypeId]:
    if not registry.targets:
        raise NoTargetsError("name filters did not match any record definition")
    return sorted(registry.targets)


def toposort_records(records: dict[TypeId, RecordInfo], targets: Iterable[TypeId]) -> list[TypeId]:
    """Order the dependency closure of ``targets`` so dependencies come first.

    Each node is popped twice: the first pop marks it visited and pushes it
    back under every dependency not yet visited, the second pop emits it.
    A dependency reached again before its own expansion is pushed again so it
    is expanded above the newer dependent; stale copies are skipped once
    processed. Inside a pointer cycle whichever member is re-popped first is
    emitted first.
    """
    order: list[TypeId] = []
    discovered: set[TypeId] = set()
    visited: set[TypeId] = set()
    processed: set[TypeId] = set()
    stack: list[TypeId] = []

    for target in targets:
        if target not in records:
            log.debug("root %s has no registered definition", target)
            continue
        stack.append(target)
        discovered.add(target)

    while stack:
        type_id = stack.pop()
        if type_id not in visited:
            visited.add(type_id)
            stack.append(type_id)
            for field in records[type_id].fields:
                dep = field.underlying
                if dep in records and dep not in visited:
                    discovered.add(dep)
                    stack.append(dep)
        elif type_id not in processed:
            processed.add(type_id)
            order.append(type_id)

    log.debug("closure: %d discovered, %d emitted", len(discovered), len(order))
    if not order:
        raise NothingFoundError("no records found for the selected names")
    return order


def ordered_closure(registry: LayoutRegistry) -> list[TypeId]:
    return toposort_records(registry.records, select_targets(registry))
