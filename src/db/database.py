import os
import sqlite3
import logging

from db.models import Config
from db.schema import SCHEMA_V1_SQL, SCHEMA_V2_SQL

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = 2

def initialize_database(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, "db.sqlite3")
    logger.info("Database file path: %s", sqlite_path)

    db = sqlite3.connect(sqlite_path)
    db.row_factory = sqlite3.Row

    existing_version = int(db.execute("PRAGMA user_version").fetchone()[0])
    upgrade_database_if_needed(db, existing_version)

    return db

def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int) -> None:
    logger.debug("Existing database version: %s", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    if existing_version <= 0:
        logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript(SCHEMA_V1_SQL)
        db.commit()

    if existing_version <= 1:
        logger.info("Migrate database version 2...")
        db.execute("PRAGMA user_version=2")
        db.executescript(SCHEMA_V2_SQL)
        db.commit()

# -------------------------------
# CONFIG
# -------------------------------
def get_config(db: sqlite3.Connection) -> Config:
    row = db.execute("""
        SELECT lrclib_instance,
               validation_debounce_ms,
               solver_max_attempts
        FROM config_data
        LIMIT 1
    """).fetchone()
    if row is None:
        return Config()
    return Config.from_row(row)


def set_config(db: sqlite3.Connection, config: Config):
    db.execute("""
        UPDATE config_data
        SET lrclib_instance = ?,
            validation_debounce_ms = ?,
            solver_max_attempts = ?
        WHERE 1
    """, (
        config.lrclib_instance,
        int(config.validation_debounce_ms),
        config.solver_max_attempts,
    ))
    db.commit()
