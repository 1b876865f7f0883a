"""Wishlist persistence.

This module only translates wishlist operations into SQL.
Routes validate input before calling in; nothing here re-checks it.
"""

from __future__ import annotations

from wishkeeper.helpers.db import NO_RESULT


class Wishlist:
    def __init__(self, connector):
        self.connector = connector

    def get_all(self):
        return self.connector.query('SELECT * FROM wishlists')

    def get(self, wishlist_id: int):
        """Return the wishlist row, None if there is none, NO_RESULT on failure."""
        rows = self.connector.prepared_query(
            'SELECT * FROM wishlists WHERE wishlist_id = %s',
            (wishlist_id,),
        )
        if rows is NO_RESULT:
            return NO_RESULT
        return rows[0] if rows else None

    def create(self, wishlist_name: str, wishlist_date: str):
        return self.connector.prepared_query(
            '''INSERT INTO wishlists (wishlist_name, wishlist_date, wishlist_last_updated)
               VALUES (%s, %s, NOW())''',
            (wishlist_name, wishlist_date),
        )

    def update(self, wishlist_id: int, wishlist_name: str, wishlist_date: str):
        return self.connector.prepared_query(
            '''UPDATE wishlists
               SET wishlist_name = %s, wishlist_date = %s, wishlist_last_updated = NOW()
               WHERE wishlist_id = %s''',
            (wishlist_name, wishlist_date, wishlist_id),
        )

    def delete(self, wishlist_id: int):
        # Child wishes go with it through the ON DELETE CASCADE foreign key.
        return self.connector.prepared_query(
            'DELETE FROM wishlists WHERE wishlist_id = %s',
            (wishlist_id,),
        )

    def exists(self, wishlist_id: int):
        rows = self.connector.prepared_query(
            'SELECT wishlist_id FROM wishlists WHERE wishlist_id = %s',
            (wishlist_id,),
        )
        if rows is NO_RESULT:
            return NO_RESULT
        return len(rows) > 0

    def touch(self, wishlist_id: int):
        """Bump wishlist_last_updated, e.g. after one of its wishes changed."""
        return self.connector.prepared_query(
            'UPDATE wishlists SET wishlist_last_updated = NOW() WHERE wishlist_id = %s',
            (wishlist_id,),
        )
