from __future__ import annotations

# v1 schema: a single-row settings table.
SCHEMA_V1_SQL = """
CREATE TABLE config_data (
    id INTEGER PRIMARY KEY,
    lrclib_instance TEXT DEFAULT 'https://lrclib.net',
    validation_debounce_ms INTEGER DEFAULT 1000
);

INSERT INTO config_data (lrclib_instance, validation_debounce_ms) VALUES ('https://lrclib.net', 1000);
"""

# v2: optional ceiling for the proof-of-work search (NULL = unbounded).
SCHEMA_V2_SQL = """
ALTER TABLE config_data ADD COLUMN solver_max_attempts INTEGER DEFAULT NULL;
"""
