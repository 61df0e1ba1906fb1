import pytest

from nestedset.builder import TreeBuilder
from nestedset.flatten import flatten_forest
from nestedset.indexer import NestedSetIndexer
from nestedset.models import ConversionSettings, Record


def make_records(rows):
    return [Record(position=i, data=row) for i, row in enumerate(rows, start=1)]


@pytest.fixture
def rows():
    return [
        {"id": "3", "parent_id": "1", "name": "second child"},
        {"id": "1", "parent_id": "", "name": "root"},
        {"id": "2", "parent_id": "1", "name": "first child"},
    ]


def build_indexed(rows, settings=None):
    forest = TreeBuilder(settings).build(make_records(rows))
    return NestedSetIndexer().index(forest)


def test_preorder_emission_with_passthrough(rows):
    output = flatten_forest(build_indexed(rows))

    assert [r.data for r in output] == [
        {"id": "1", "parent_id": "", "name": "root", "left": 1, "right": 6, "depth": 0},
        {"id": "3", "parent_id": "1", "name": "second child", "left": 2, "right": 3, "depth": 1},
        {"id": "2", "parent_id": "1", "name": "first child", "left": 4, "right": 5, "depth": 1},
    ]
    assert [r.position for r in output] == [1, 2, 3]


def test_input_records_are_not_modified(rows):
    records = make_records(rows)
    forest = NestedSetIndexer().index(TreeBuilder().build(records))

    flatten_forest(forest)

    assert records[1].data == {"id": "1", "parent_id": "", "name": "root"}


def test_custom_names_without_depth(rows):
    settings = ConversionSettings(left_field="lft", right_field="rgt", emit_depth=False)

    output = flatten_forest(build_indexed(rows, settings), settings)

    assert output[0].data == {"id": "1", "parent_id": "", "name": "root", "lft": 1, "rgt": 6}
    assert all("depth" not in r.data for r in output)


def test_position_and_child_count_fields(rows):
    settings = ConversionSettings(position_field="pid", parent_position_field="parent_pid",
                                  child_count_field="count")

    output = flatten_forest(build_indexed(rows, settings), settings)

    assert [(r.get("pid"), r.get("parent_pid"), r.get("count")) for r in output] == [
        (2, None, 2),
        (1, 2, 0),
        (3, 2, 0),
    ]


def test_existing_index_columns_are_overwritten():
    output = flatten_forest(build_indexed([
        {"id": "a", "left": "99", "parent_id": "", "right": "100"},
    ]))

    assert output[0].data == {"id": "a", "left": 1, "parent_id": "", "right": 2, "depth": 0}
    assert list(output[0].data) == ["id", "left", "parent_id", "right", "depth"]


def test_unindexed_forest_is_rejected(rows):
    forest = TreeBuilder().build(make_records(rows))

    with pytest.raises(ValueError):
        flatten_forest(forest)
