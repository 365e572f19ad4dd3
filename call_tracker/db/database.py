import sqlite3
from contextlib import contextmanager


@contextmanager
def get_db(db_path: str):
    """One short transaction: commit on a clean exit, roll back on error."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        conn.close()
