"""
Substring indexes for search.

B-tree composite indexes (status + sort column, foreign keys, soft delete)
are declared on the models. Trigram GIN indexes need `pg_trgm` and an
operator class Django models cannot express portably, so they are declared
here and applied by migration on Postgres only. Other backends skip them
and fall back to sequential scans.

Search matches with `LIKE '%term%'` on already-lowercased text (the
`contains` lookup), which is what `gin_trgm_ops` accelerates. `icontains`
would wrap the column in UPPER() and bypass the index.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class TrigramIndex:
    table: str
    column: str
    name: str

    def create_sql(self, schema_editor) -> str:
        quote = schema_editor.quote_name
        return (
            f"CREATE INDEX IF NOT EXISTS {quote(self.name)} "
            f"ON {quote(self.table)} USING GIN ({quote(self.column)} gin_trgm_ops)"
        )

    def drop_sql(self, schema_editor) -> str:
        return f"DROP INDEX IF EXISTS {schema_editor.quote_name(self.name)}"


TRIGRAM_INDEXES = (
    TrigramIndex('tasks_task', 'searchable_text', 'task_searchable_text_trgm'),
    TrigramIndex('crm_customer', 'searchable_text', 'customer_searchable_text_trgm'),
    TrigramIndex('locations_location', 'searchable_text', 'location_searchable_text_trgm'),
    # Raw phone for prefix/partial lookups from the customer picker
    TrigramIndex('crm_customer', 'phone', 'customer_phone_trgm'),
)


def _is_postgres(schema_editor) -> bool:
    return schema_editor.connection.vendor == 'postgresql'


def create_trigram_indexes(apps, schema_editor):
    """Migration hook: enable pg_trgm and build the GIN indexes."""
    if not _is_postgres(schema_editor):
        return
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")
    for index in TRIGRAM_INDEXES:
        schema_editor.execute(index.create_sql(schema_editor))


def drop_trigram_indexes(apps, schema_editor):
    if not _is_postgres(schema_editor):
        return
    for index in TRIGRAM_INDEXES:
        schema_editor.execute(index.drop_sql(schema_editor))
