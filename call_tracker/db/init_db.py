import logging
from call_tracker.db.database import get_db

logger = logging.getLogger(__name__)

def init_db(db_path: str):
    """Initialize database with the key-value table"""
    with get_db(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        ''')

        logger.info("Database initialized at %s", db_path)
