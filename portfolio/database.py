"""Database layer for sheet snapshots and site settings."""
import psycopg2
from psycopg2 import pool
from typing import Optional, List, Dict, Any
from datetime import datetime, timedelta, timezone
import json
import logging
from portfolio.models import CacheEntry

logger = logging.getLogger(__name__)


def entry_from_row(cache_key: str, payload: Any, fetched_at: Any) -> CacheEntry:
    """
    Validate a stored row and build a CacheEntry from it.

    Args:
        cache_key: Logical cache key
        payload: Stored payload (list of records)
        fetched_at: Stored fetch timestamp

    Returns:
        CacheEntry

    Raises:
        ValueError: If the stored row is malformed
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"payload is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise ValueError(f"payload must be a list, got {type(payload).__name__}")

    for row in payload:
        if not isinstance(row, dict):
            raise ValueError(f"payload rows must be objects, got {type(row).__name__}")

    if not isinstance(fetched_at, datetime):
        raise ValueError(f"fetched_at must be a timestamp, got {fetched_at!r}")

    if fetched_at.tzinfo is None:
        fetched_at = fetched_at.replace(tzinfo=timezone.utc)

    return CacheEntry(key=cache_key, fetched_at=fetched_at, payload=payload)


class Database:
    """PostgreSQL storage with connection pooling."""

    def __init__(self, connection_string: str, min_conn: int = 1, max_conn: int = 5):
        """
        Initialize database connection pool.

        Args:
            connection_string: PostgreSQL connection string
            min_conn: Minimum connections in pool
            max_conn: Maximum connections in pool
        """
        self.connection_pool = psycopg2.pool.SimpleConnectionPool(
            min_conn,
            max_conn,
            connection_string
        )

        if self.connection_pool:
            logger.info("Database connection pool created successfully")
        else:
            raise Exception("Failed to create connection pool")

    def init_schema(self):
        """Create database tables if they don't exist."""
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                # One snapshot per logical key
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS sheet_cache (
                        cache_key VARCHAR(64) PRIMARY KEY,
                        payload JSONB NOT NULL,
                        fetched_at TIMESTAMPTZ NOT NULL
                    )
                """)

                cur.execute("""
                    CREATE TABLE IF NOT EXISTS settings (
                        name VARCHAR(64) PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)

                conn.commit()
                logger.info("Database schema initialized successfully")

        finally:
            self.connection_pool.putconn(conn)

    def cache_get(self, cache_key: str) -> Optional[CacheEntry]:
        """
        Get the stored snapshot for a key.

        Freshness is not checked here. Unreadable or malformed rows are
        reported as missing.

        Args:
            cache_key: Cache key

        Returns:
            Stored entry or None
        """
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT payload, fetched_at
                    FROM sheet_cache
                    WHERE cache_key = %s
                """, (cache_key,))

                row = cur.fetchone()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to read cache entry {cache_key}: {e}")
            return None
        finally:
            self.connection_pool.putconn(conn)

        if not row:
            return None

        try:
            return entry_from_row(cache_key, row[0], row[1])
        except ValueError as e:
            logger.warning(f"Ignoring malformed cache entry {cache_key}: {e}")
            return None

    def cache_set(self, entry: CacheEntry) -> bool:
        """
        Store a snapshot, replacing any previous one for its key.

        Args:
            entry: Snapshot to store

        Returns:
            True if successful
        """
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO sheet_cache (cache_key, payload, fetched_at)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (cache_key) DO UPDATE SET
                        payload = EXCLUDED.payload,
                        fetched_at = EXCLUDED.fetched_at
                """, (entry.key, json.dumps(entry.payload), entry.fetched_at))

                conn.commit()
                logger.info(f"Cached {len(entry.payload)} rows under {entry.key}")
                return True
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to cache {entry.key}: {e}")
            return False
        finally:
            self.connection_pool.putconn(conn)

    def get_setting(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a stored setting, or ``default`` if unset or unreadable."""
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT value FROM settings WHERE name = %s", (name,))
                row = cur.fetchone()
                return row[0] if row and row[0] else default
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to read setting {name}: {e}")
            return default
        finally:
            self.connection_pool.putconn(conn)

    def set_setting(self, name: str, value: str) -> bool:
        """Store a setting."""
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO settings (name, value) VALUES (%s, %s)
                    ON CONFLICT (name) DO UPDATE SET value = EXCLUDED.value
                """, (name, value))
                conn.commit()
                return True
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to store setting {name}: {e}")
            return False
        finally:
            self.connection_pool.putconn(conn)

    def get_stats(self, window: timedelta) -> List[Dict[str, Any]]:
        """
        Describe every stored snapshot.

        Args:
            window: Freshness window used to flag entries

        Returns:
            One dict per key with row count, fetch time, age and freshness
        """
        conn = self.connection_pool.getconn()
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT cache_key, jsonb_array_length(payload), fetched_at
                    FROM sheet_cache
                    ORDER BY cache_key
                """)
                rows = cur.fetchall()
        finally:
            self.connection_pool.putconn(conn)

        now = datetime.now(timezone.utc)
        stats = []
        for cache_key, row_count, fetched_at in rows:
            age = now - fetched_at
            stats.append({
                "key": cache_key,
                "rows": row_count,
                "fetched_at": fetched_at,
                "age": age,
                "fresh": age < window,
            })
        return stats

    def close(self):
        """Close all connections in the pool."""
        if self.connection_pool:
            self.connection_pool.closeall()
            logger.info("Database connection pool closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
