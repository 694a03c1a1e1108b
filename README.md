# colstore

Building blocks for a small column-store database. A database is described
by an XML schema (relations, attributes, primary keys, foreign keys, unique
constraints and views). Each column of each relation lives in its own
binary `.dat` file, one record per row, and every record carries a
"deleted" flag so rows can be soft-deleted and restored.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Layout on disk

```
<root>/
    <database>/
        <database>_schema.xml
        <relation>/
            <attribute>.dat
```

A record in a column file is a one-byte deleted flag (0 live, anything else
deleted) followed by the value:

- `integer`: little-endian signed 64-bit number
- `decimal`: little-endian double
- `date`: day, month and year as little-endian unsigned 16-bit numbers
- `string` (and any other type): little-endian unsigned 64-bit length, then
  that many bytes

## A schema document

```xml
<ColumnStoreSchema>
  <Database name="library">
    <Relations>
      <Relation name="books">
        <Attributes>
          <Attribute name="id" type="integer" nullable="false"/>
          <Attribute name="title" type="string" nullable="true"/>
        </Attributes>
        <PrimaryKey>
          <AttributeRef name="id"/>
        </PrimaryKey>
      </Relation>
    </Relations>
    <Views>
      <View name="all_books">select id,title from books</View>
    </Views>
  </Database>
</ColumnStoreSchema>
```

Two readers exist for such a document:

- `colstore.loader.load_schema(path)` returns a `colstore.schema.Database`
  with primary keys, foreign keys and unique constraints wired into the
  relations and attribute flags (`is_pk`, `is_fk`, `unique`). It reads the
  `nullable` and `unique` attributes of `<Attribute>`, requires the root
  element `ColumnStoreSchema`, and raises `colstore.loader.SchemaError` when
  the document cannot be read.
- `colstore.install.parse_install_schema(path)` reads the same document the
  way it is given when creating a database: it reads `isNullable` and
  `isUnique`, registers the constraints on the database only, and reports
  incomplete entries on stderr. `install_schema(xml_path, root)` parses it
  and copies the file to `root/<name>/<name>_schema.xml`.

Attributes of a relation are kept ordered by name; that order is the column
order everywhere in the package.

## Using it

```python
from colstore.install import install_schema
from colstore.loader import load_schema
from colstore.storage import append_record, column_path, read_records

install_schema("library.xml", "Databases")
db = load_schema("Databases/library/library_schema.xml")
books = db.get_relation("books")

# install_schema does not create relation directories or column files.
for attr in books.attributes.values():
    column_path(books, attr, "Databases").parent.mkdir(parents=True, exist_ok=True)

append_record(column_path(books, "id", "Databases"), "integer", 1)
append_record(column_path(books, "title", "Databases"), "string", "Dune")

for record in read_records(column_path(books, "id", "Databases"), "integer"):
    print(record.offset, record.deleted, record.value)
```

Soft deletion, found by the primary key of a relation loaded with
`load_schema`:

```python
from colstore.deleter import delete_row, undelete_row

delete_row(books, 1, "Databases")    # returns the row index, here 0
undelete_row(books, 1, "Databases")
```

Both raise `colstore.deleter.RowNotFoundError` when no matching row in the
wanted state exists, and `ValueError` when the relation has no primary key
or its type is not `integer`, `decimal` or `string`.

Rendering:

```python
from colstore.display import format_schema, format_table, read_live_rows

print(format_schema(db))
print(format_table(db, "books", "Databases"))
rows = read_live_rows(db, "books", "Databases")   # [["1", "Dune"]]
```

Constraint checks against the live values on disk:

```python
from colstore.colval import ColVal
from colstore.constraints import validate_primary_key

validate_primary_key(books, ColVal.from_string(books.get_attribute("id"), "2"), "Databases")
```

Other pieces:

- `colstore.query.parse_query` splits a `select ... from ... where ...
  order by ...` string into `result_cols`, `relations`, `conditions` and
  `order_by`; a string not starting with `select` raises `ValueError`.
- `colstore.dates.DateDDMMYYYY.parse("07/03/2025")` reads a date; `str()`
  gives `2025-03-07`.
- `colstore.colval.ColVal` holds one typed value of an attribute and
  compares and hashes by type and value.
- `colstore.rows.Row` and `colstore.rows.Table` keep rows of values in
  memory.

## What it does not do

- There are no command-line tools; everything is used from Python.
- There is no engine object that finds every installed database under a
  root, and no metadata file is written.
- Rows are not inserted, updated or loaded from CSV as a whole; column
  records are appended one column at a time with
  `colstore.storage.append_record`, and keeping the columns in step is up
  to the caller.
- Parsed queries are not executed.
- Values are kept in column files only; there is no paging of values in
  memory.