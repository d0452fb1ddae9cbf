import os
import sys
import unittest


REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
sys.path.insert(0, SRC_ROOT)


from structlayout.analysis.layout_errors import (  # noqa: E402
    NoMatchError,
    NothingFoundError,
    NoTargetsError,
)
from structlayout.analysis.layout_sort import (  # noqa: E402
    ordered_closure,
    select_targets,
    toposort_records,
)
from structlayout.analysis.layout_types import (  # noqa: E402
    Field,
    LayoutRegistry,
    RecordInfo,
    RecordKind,
    TypeId,
)


def record(name: str, *deps: str, pointer: bool = False) -> RecordInfo:
    type_id = TypeId(f"struct {name}")
    fields = []
    for idx, dep in enumerate(deps):
        dep_id = TypeId(f"struct {dep}")
        fields.append(
            Field(
                name=f"f{idx}",
                type_id=TypeId(f"{dep_id} *") if pointer else dep_id,
                underlying=dep_id,
                offset=idx * 64,
            )
        )
    return RecordInfo(kind=RecordKind.STRUCT, type_id=type_id, size=8 * max(len(deps), 1), aliases={name}, fields=fields)


def records_of(*infos: RecordInfo) -> dict[TypeId, RecordInfo]:
    return {info.type_id: info for info in infos}


def tid(name: str) -> TypeId:
    return TypeId(f"struct {name}")


class ToposortTests(unittest.TestCase):
    def test_dependencies_come_first(self) -> None:
        records = records_of(record("Line", "Point", "Point"), record("Point"))
        self.assertEqual(toposort_records(records, [tid("Line")]), [tid("Point"), tid("Line")])

    def test_diamond_respects_every_edge(self) -> None:
        # A -> B, A -> C, C -> B
        records = records_of(record("A", "B", "C"), record("B"), record("C", "B"))
        order = toposort_records(records, [tid("A")])
        self.assertEqual(sorted(order), [tid("A"), tid("B"), tid("C")])
        self.assertLess(order.index(tid("B")), order.index(tid("C")))
        self.assertLess(order.index(tid("C")), order.index(tid("A")))

    def test_root_that_is_also_a_dependency_comes_first(self) -> None:
        # B is seeded (discovered) before C expands, but C still depends on it.
        records = records_of(record("B"), record("C", "B"))
        self.assertEqual(toposort_records(records, [tid("B"), tid("C")]), [tid("B"), tid("C")])

    def test_long_chain_is_ordered(self) -> None:
        names = [f"N{i}" for i in range(50)]
        infos = [record(name, names[i + 1]) for i, name in enumerate(names[:-1])]
        infos.append(record(names[-1]))
        order = toposort_records(records_of(*infos), [tid("N0")])
        self.assertEqual(order, [tid(name) for name in reversed(names)])

    def test_closure_excludes_unreachable_records(self) -> None:
        records = records_of(record("Line", "Point"), record("Point"), record("Unrelated"))
        self.assertNotIn(tid("Unrelated"), toposort_records(records, [tid("Line")]))

    def test_each_record_emitted_once(self) -> None:
        records = records_of(
            record("Root", "Shared", "Left", "Right"),
            record("Left", "Shared"),
            record("Right", "Shared"),
            record("Shared"),
        )
        order = toposort_records(records, [tid("Root"), tid("Left")])
        self.assertEqual(len(order), len(set(order)))
        self.assertEqual(set(order), set(records))
        self.assertEqual(order[0], tid("Shared"))
        self.assertEqual(order[-1], tid("Root"))

    def test_self_reference_terminates(self) -> None:
        records = records_of(record("Node", "Node", pointer=True))
        self.assertEqual(toposort_records(records, [tid("Node")]), [tid("Node")])

    def test_mutual_reference_terminates(self) -> None:
        records = records_of(record("A", "B", pointer=True), record("B", "A", pointer=True))
        order = toposort_records(records, [tid("A")])
        # B is re-popped first inside the cycle
        self.assertEqual(order, [tid("B"), tid("A")])

    def test_unregistered_dependency_is_a_dead_edge(self) -> None:
        records = records_of(record("Handle", "Opaque", pointer=True))
        self.assertEqual(toposort_records(records, [tid("Handle")]), [tid("Handle")])

    def test_empty_result_is_an_error(self) -> None:
        with self.assertRaises(NothingFoundError):
            toposort_records({}, [tid("Missing")])
        with self.assertRaises(NoMatchError):
            toposort_records({}, [])


class SelectTargetsTests(unittest.TestCase):
    def test_no_targets_is_an_error(self) -> None:
        registry = LayoutRegistry(records=records_of(record("Point")))
        with self.assertRaises(NoTargetsError):
            select_targets(registry)

    def test_targets_are_sorted(self) -> None:
        registry = LayoutRegistry(targets={tid("B"), tid("A")})
        self.assertEqual(select_targets(registry), [tid("A"), tid("B")])

    def test_ordered_closure(self) -> None:
        registry = LayoutRegistry(
            records=records_of(record("Line", "Point"), record("Point")),
            targets={tid("Line")},
        )
        self.assertEqual(ordered_closure(registry), [tid("Point"), tid("Line")])


if __name__ == "__main__":
    unittest.main()
