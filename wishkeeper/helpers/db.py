import logging
import threading
from datetime import date, datetime
from decimal import Decimal

import mysql.connector
from mysql.connector import pooling
from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'wishkeeper.db'


class _NoResult:
    """Marker returned when a statement could not be executed.

    Falsy like an empty result set, but callers compare against it by identity
    so "the database failed" never reads as "zero rows".
    """

    def __bool__(self):
        return False

    def __repr__(self):
        return 'NO_RESULT'


NO_RESULT = _NoResult()


def _jsonable(row: dict) -> dict:
    """Convert driver types in a fetched row to JSON-friendly values."""
    out = {}
    for key, value in row.items():
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        elif isinstance(value, (bytes, bytearray)):
            value = value.decode('utf-8')
        out[key] = value
    return out


class Connector:
    """Pooled connection wrapper for the MariaDB/MySQL database.

    Every call checks a connection out of a bounded pool, runs exactly one
    statement and hands the connection back, whether the statement succeeded
    or not. Driver failures are logged and reported as NO_RESULT.
    """

    def __init__(self, *, host, user, password, database, port=3306,
                 pool_size=10, pool_name='wishkeeper', acquire_timeout=10.0):
        settings = {
            'host': host,
            'user': user,
            'password': password,
            'database': database,
            'pool_size': pool_size,
        }
        for name, value in settings.items():
            if value is None:
                raise ValueError(f'Database {name} is undefined')
        if pool_size < 1:
            raise ValueError('Database pool_size must be at least 1')

        self._settings = {
            'host': host,
            'port': port,
            'user': user,
            'password': password,
            'database': database,
        }
        self.pool_name = pool_name
        self.pool_size = pool_size
        self.acquire_timeout = acquire_timeout

        self._pool = None
        self._pool_lock = threading.Lock()
        # mysql.connector raises PoolError on exhaustion; the semaphore turns
        # that into a bounded wait instead.
        self._slots = threading.BoundedSemaphore(pool_size)

    @property
    def pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self.pool_name,
                    pool_size=self.pool_size,
                    **self._settings,
                )
        return self._pool

    def query(self, sql: str):
        """Run an unparameterized statement (select-all style queries only)."""
        return self._execute(sql, None, prepared=False)

    def prepared_query(self, sql: str, values):
        """Run a parameterized statement with %s placeholders.

        Returns:
            list of dicts for statements that produce rows,
            {'insert_id', 'affected_rows'} for everything else,
            or NO_RESULT if the statement failed.
        """
        return self._execute(sql, tuple(values), prepared=True)

    def _execute(self, sql, values, *, prepared):
        if not self._slots.acquire(timeout=self.acquire_timeout):
            logger.error(
                'No pooled connection freed up within %ss (pool=%s, size=%s)',
                self.acquire_timeout, self.pool_name, self.pool_size,
            )
            return NO_RESULT

        cnx = None
        try:
            cnx = self.pool.get_connection()
            cursor = cnx.cursor(dictionary=True, prepared=prepared)
            try:
                if values is None:
                    cursor.execute(sql)
                else:
                    cursor.execute(sql, values)

                if cursor.with_rows:
                    return [_jsonable(row) for row in cursor.fetchall()]

                cnx.commit()
                return {
                    'insert_id': int(cursor.lastrowid or 0),
                    'affected_rows': cursor.rowcount,
                }
            finally:
                cursor.close()
        except mysql.connector.Error as e:
            logger.error('Query failed: %s | sql=%s', e, sql)
            return NO_RESULT
        finally:
            if cnx is not None:
                # Closing a pooled connection returns it to the pool
                cnx.close()
            self._slots.release()


def init_app(app, connector=None):
    """Attach a Connector built from the app config (or the one given)."""
    if connector is None:
        connector = Connector(
            host=app.config['DB_HOST'],
            port=app.config['DB_PORT'],
            user=app.config['DB_USER'],
            password=app.config['DB_PASSWORD'],
            database=app.config['DB_NAME'],
            pool_size=app.config['DB_POOL_SIZE'],
            pool_name=app.config['DB_POOL_NAME'],
            acquire_timeout=app.config['DB_ACQUIRE_TIMEOUT'],
        )
    app.extensions[EXTENSION_KEY] = connector
    return connector


def get_connector():
    """Return the Connector of the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]


def split_statements(sql_text: str) -> list[str]:
    statements = []
    for chunk in sql_text.split(';'):
        lines = [ln for ln in chunk.splitlines() if not ln.strip().startswith('--')]
        stmt = '\n'.join(lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


def apply_schema(connector, sql_text: str) -> bool:
    """Run every statement of a schema script; stop at the first failure."""
    for stmt in split_statements(sql_text):
        if connector.query(stmt) is NO_RESULT:
            return False
    return True
