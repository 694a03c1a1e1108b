import pytest

from colstore.colval import ColVal
from colstore.dates import DateDDMMYYYY
from colstore.deleter import RowNotFoundError, delete_row, undelete_row
from colstore.schema import Attribute, Database, PrimaryKeyConstraint, Relation
from colstore.storage import append_record, column_path, read_records


def _make_relation(tmp_path, name, columns, key, rows):
    db = Database(name="shop")
    rel = Relation(name)
    attrs = {}
    for col_name, col_type in columns:
        attr = Attribute(col_name, col_type, is_pk=(col_name == key))
        attrs[col_name] = attr
        rel.add_attribute(attr)
    if key is not None:
        rel.primary_key = PrimaryKeyConstraint(f"PK_{name}", rel, [key], attrs[key])
    db.add_relation(rel)
    (tmp_path / "shop" / name).mkdir(parents=True)
    for col_name, col_type in columns:
        path = column_path(rel, col_name, tmp_path)
        path.touch()
        for row in rows:
            append_record(path, col_type, row[col_name])
    return rel, attrs


@pytest.fixture
def items(tmp_path):
    rows = [
        {"id": 1, "name": "apple", "price": 1.5},
        {"id": 2, "name": "pear", "price": 2.25},
        {"id": 3, "name": "plum", "price": 0.5},
    ]
    columns = [("id", "integer"), ("name", "string"), ("price", "decimal")]
    return _make_relation(tmp_path, "items", columns, "id", rows)


def _flags(rel, root):
    return {
        name: [r.deleted for r in read_records(column_path(rel, attr, root), attr.type)]
        for name, attr in rel.attributes.items()
    }


def test_delete_marks_every_column(tmp_path, items):
    rel, _ = items
    assert delete_row(rel, 2, tmp_path) == 1
    for flags in _flags(rel, tmp_path).values():
        assert flags == [False, True, False]


def test_delete_keeps_values(tmp_path, items):
    rel, attrs = items
    delete_row(rel, 1, tmp_path)
    values = [r.value for r in read_records(column_path(rel, attrs["name"], tmp_path), "string")]
    assert values == ["apple", "pear", "plum"]


def test_undelete_round_trip(tmp_path, items):
    rel, _ = items
    delete_row(rel, 3, tmp_path)
    assert undelete_row(rel, 3, tmp_path) == 2
    for flags in _flags(rel, tmp_path).values():
        assert flags == [False, False, False]


def test_delete_twice_raises(tmp_path, items):
    rel, _ = items
    delete_row(rel, 2, tmp_path)
    with pytest.raises(RowNotFoundError):
        delete_row(rel, 2, tmp_path)


def test_undelete_live_row_raises(tmp_path, items):
    rel, _ = items
    with pytest.raises(RowNotFoundError):
        undelete_row(rel, 1, tmp_path)


def test_missing_key_raises(tmp_path, items):
    rel, _ = items
    with pytest.raises(RowNotFoundError):
        delete_row(rel, 99, tmp_path)


def test_colval_key(tmp_path, items):
    rel, attrs = items
    assert delete_row(rel, ColVal(attrs["id"], 3), tmp_path) == 2


def test_colval_with_non_key_attribute_rejected(tmp_path, items):
    rel, attrs = items
    with pytest.raises(ValueError):
        delete_row(rel, ColVal(attrs["name"], "pear"), tmp_path)


def test_relation_without_key_rejected(tmp_path):
    rel, _ = _make_relation(
        tmp_path, "loose", [("a", "integer")], None, [{"a": 1}]
    )
    with pytest.raises(ValueError):
        delete_row(rel, 1, tmp_path)


def test_string_key(tmp_path):
    rows = [{"code": "x", "qty": 4}, {"code": "y", "qty": 5}]
    rel, _ = _make_relation(
        tmp_path, "stock", [("code", "string"), ("qty", "integer")], "code", rows
    )
    assert delete_row(rel, "y", tmp_path) == 1
    assert _flags(rel, tmp_path)["qty"] == [False, True]


def test_decimal_key(tmp_path):
    rows = [{"k": 1.5, "v": "a"}, {"k": 2.5, "v": "b"}]
    rel, _ = _make_relation(
        tmp_path, "dec", [("k", "decimal"), ("v", "string")], "k", rows
    )
    assert delete_row(rel, 1.5, tmp_path) == 0
    assert _flags(rel, tmp_path)["v"] == [True, False]


def test_date_key_unsupported(tmp_path):
    rows = [{"d": DateDDMMYYYY(1, 2, 2020)}]
    rel, _ = _make_relation(tmp_path, "days", [("d", "date")], "d", rows)
    with pytest.raises(ValueError):
        delete_row(rel, DateDDMMYYYY(1, 2, 2020), tmp_path)


def test_duplicate_keys_deleted_in_order(tmp_path):
    rows = [{"id": 7, "n": "first"}, {"id": 7, "n": "second"}]
    rel, _ = _make_relation(
        tmp_path, "dup", [("id", "integer"), ("n", "string")], "id", rows
    )
    assert delete_row(rel, 7, tmp_path) == 0
    assert delete_row(rel, 7, tmp_path) == 1
    assert undelete_row(rel, 7, tmp_path) == 0


def test_missing_files_raise(tmp_path):
    db = Database(name="ghost")
    rel = Relation("t")
    attr = Attribute("id", "integer", is_pk=True)
    rel.add_attribute(attr)
    rel.primary_key = PrimaryKeyConstraint("PK_t", rel, ["id"], attr)
    db.add_relation(rel)
    with pytest.raises(FileNotFoundError):
        delete_row(rel, 1, tmp_path)