import pytest

from colstore.deleter import delete_row
from colstore.display import format_schema, format_table, read_live_rows
from colstore.schema import (
    Attribute,
    Database,
    PrimaryKeyConstraint,
    Relation,
    RelationNotFoundError,
)
from colstore.storage import append_record, column_path


def _add_relation(db, root, name, columns, key, rows):
    rel = Relation(name)
    attrs = {}
    for col_name, col_type, nullable in columns:
        attr = Attribute(col_name, col_type, nullable=nullable, is_pk=(col_name == key))
        attrs[col_name] = attr
        rel.add_attribute(attr)
    if key is not None:
        rel.primary_key = PrimaryKeyConstraint(f"PK_{name}", rel, [key], attrs[key])
    db.add_relation(rel)
    (root / db.name / name).mkdir(parents=True)
    for col_name, col_type, _ in columns:
        path = column_path(rel, col_name, root)
        path.touch()
        for row in rows:
            append_record(path, col_type, row[col_name])
    return rel


@pytest.fixture
def people_db(tmp_path):
    db = Database(name="town")
    _add_relation(
        db,
        tmp_path,
        "people",
        [("id", "integer", False), ("name", "string", True)],
        "id",
        [{"id": 1, "name": "ann"}, {"id": 22, "name": "bo"}],
    )
    return db


@pytest.fixture
def items_db(tmp_path):
    db = Database(name="shop")
    _add_relation(
        db,
        tmp_path,
        "items",
        [("id", "integer", False), ("name", "string", True), ("price", "decimal", True)],
        "id",
        [
            {"id": 1, "name": "apple", "price": 1.5},
            {"id": 2, "name": "pear", "price": 2.25},
            {"id": 3, "name": "plum", "price": 0.5},
        ],
    )
    return db


def test_read_live_rows_skips_deleted(tmp_path, items_db):
    delete_row(items_db.get_relation("items"), 2, tmp_path)
    rows = read_live_rows(items_db, "items", tmp_path)
    assert rows == [["1", "apple", "1.500000"], ["3", "plum", "0.500000"]]


def test_read_live_rows_count_after_delete_and_undelete(tmp_path, items_db):
    rel = items_db.get_relation("items")
    assert len(read_live_rows(items_db, "items", tmp_path)) == 3
    delete_row(rel, 1, tmp_path)
    assert [row[1] for row in read_live_rows(items_db, "items", tmp_path)] == [
        "pear",
        "plum",
    ]


def test_format_table_exact(tmp_path, people_db):
    expected = (
        "+----+------+\n"
        "| id | name |\n"
        "+----+------+\n"
        "| 1  | ann  |\n"
        "+----+------+\n"
        "| 22 | bo   |\n"
        "+----+------+\n"
    )
    assert format_table(people_db, "people", tmp_path) == expected


def test_format_table_lines_have_equal_width(tmp_path, items_db):
    lines = format_table(items_db, "items", tmp_path).splitlines()
    assert len({len(line) for line in lines}) == 1
    assert len(lines) == 3 + 2 * 3


def test_format_table_omits_deleted(tmp_path, items_db):
    delete_row(items_db.get_relation("items"), 2, tmp_path)
    text = format_table(items_db, "items", tmp_path)
    assert "pear" not in text
    assert "plum" in text


def test_unknown_relation_raises(tmp_path, people_db):
    with pytest.raises(RelationNotFoundError):
        format_table(people_db, "nobody", tmp_path)


def test_missing_column_file_raises(tmp_path, people_db):
    column_path(people_db.get_relation("people"), "name", tmp_path).unlink()
    with pytest.raises(FileNotFoundError):
        read_live_rows(people_db, "people", tmp_path)


def test_format_schema_exact(people_db):
    divider = "+-------+---------+------+-----+\n"
    expected = (
        "Table: people\n"
        + divider
        + "| Field | Type    | Null | Key |\n"
        + divider
        + "| id    | integer | NO   | PRI |\n"
        + divider
        + "| name  | string  | YES  |     |\n"
        + divider
        + "\n"
    )
    assert format_schema(people_db) == expected


def test_format_schema_key_kinds():
    db = Database(name="k")
    rel = Relation("t")
    rel.add_attribute(Attribute("u", "string", unique=True))
    rel.add_attribute(Attribute("f", "integer", is_fk=True))
    db.add_relation(rel)
    text = format_schema(db)
    assert "| UNI |" in text
    assert "| FOR |" in text


def test_format_schema_empty_database():
    assert format_schema(Database(name="void")) == "Database 'void' has no tables.\n"


def test_format_schema_lists_every_table(tmp_path, people_db):
    _add_relation(
        people_db, tmp_path, "animals", [("kind", "string", True)], None, []
    )
    text = format_schema(people_db)
    assert text.index("Table: animals") < text.index("Table: people")