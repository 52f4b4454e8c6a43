"""SQL statements for the bucket engine.

Bucket ``0`` is the root namespace of every database. An entry row holds
either a scalar ``value`` or a ``child_id`` pointing at a nested bucket.
"""

from __future__ import annotations

SCHEMA_SCRIPT = """
PRAGMA journal_mode = WAL;
CREATE TABLE IF NOT EXISTS buckets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    sequence INTEGER NOT NULL DEFAULT 0
);
INSERT OR IGNORE INTO buckets (id, sequence) VALUES (0, 0);
CREATE TABLE IF NOT EXISTS entries (
    bucket_id INTEGER NOT NULL REFERENCES buckets (id),
    key BLOB NOT NULL,
    value BLOB,
    child_id INTEGER REFERENCES buckets (id),
    PRIMARY KEY (bucket_id, key)
) WITHOUT ROWID;
"""

SELECT_SCHEMA_PRESENT = (
    "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'entries'"
)

SELECT_ENTRY = "SELECT value, child_id FROM entries WHERE bucket_id = ? AND key = ?"

SELECT_ENTRIES = (
    "SELECT key, value, child_id FROM entries WHERE bucket_id = ? ORDER BY key"
)

SELECT_CHILD_BUCKETS = (
    "SELECT key, child_id FROM entries "
    "WHERE bucket_id = ? AND child_id IS NOT NULL ORDER BY key"
)

INSERT_BUCKET = "INSERT INTO buckets (sequence) VALUES (0)"

INSERT_CHILD_ENTRY = "INSERT INTO entries (bucket_id, key, child_id) VALUES (?, ?, ?)"

UPSERT_VALUE = "INSERT OR REPLACE INTO entries (bucket_id, key, value) VALUES (?, ?, ?)"

DELETE_ENTRY = "DELETE FROM entries WHERE bucket_id = ? AND key = ?"

SELECT_SUBTREE_IDS = """
WITH RECURSIVE subtree (id) AS (
    SELECT ?
    UNION ALL
    SELECT entries.child_id FROM entries
    JOIN subtree ON entries.bucket_id = subtree.id
    WHERE entries.child_id IS NOT NULL
)
SELECT id FROM subtree
"""

DELETE_BUCKET_ENTRIES = "DELETE FROM entries WHERE bucket_id = ?"

DELETE_BUCKET = "DELETE FROM buckets WHERE id = ?"

SELECT_STANDALONE_SIZE = (
    "SELECT COUNT(*), COALESCE(SUM(length(key) + COALESCE(length(value), 0)), 0) "
    "FROM entries WHERE bucket_id = ?"
)

SELECT_SEQUENCE = "SELECT sequence FROM buckets WHERE id = ?"

UPDATE_SEQUENCE = "UPDATE buckets SET sequence = ? WHERE id = ?"
