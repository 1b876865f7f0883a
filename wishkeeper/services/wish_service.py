"""Wish persistence, always scoped to the owning wishlist."""

from __future__ import annotations

from wishkeeper.helpers.db import NO_RESULT


class Wish:
    def __init__(self, connector):
        self.connector = connector

    def get_all(self, wishlist_id: int):
        return self.connector.prepared_query(
            'SELECT * FROM wishes WHERE wishlist_id = %s',
            (wishlist_id,),
        )

    def get(self, wishlist_id: int, wish_id: int):
        rows = self.connector.prepared_query(
            'SELECT * FROM wishes WHERE wishlist_id = %s AND wish_id = %s',
            (wishlist_id, wish_id),
        )
        if rows is NO_RESULT:
            return NO_RESULT
        return rows[0] if rows else None

    def create(self, wishlist_id: int, wish_name: str, wish_price, wish_link: str):
        return self.connector.prepared_query(
            '''INSERT INTO wishes
               (wishlist_id, wish_name, wish_price, wish_link, wish_last_updated)
               VALUES (%s, %s, %s, %s, NOW())''',
            (wishlist_id, wish_name, wish_price, wish_link),
        )

    def update(self, wishlist_id: int, wish_id: int, wish_name: str, wish_price, wish_link: str):
        return self.connector.prepared_query(
            '''UPDATE wishes
               SET wish_name = %s, wish_price = %s, wish_link = %s, wish_last_updated = NOW()
               WHERE wishlist_id = %s AND wish_id = %s''',
            (wish_name, wish_price, wish_link, wishlist_id, wish_id),
        )

    def delete(self, wishlist_id: int, wish_id: int):
        return self.connector.prepared_query(
            'DELETE FROM wishes WHERE wishlist_id = %s AND wish_id = %s',
            (wishlist_id, wish_id),
        )

    def exists(self, wishlist_id: int, wish_id: int):
        rows = self.connector.prepared_query(
            'SELECT wish_id FROM wishes WHERE wishlist_id = %s AND wish_id = %s',
            (wishlist_id, wish_id),
        )
        if rows is NO_RESULT:
            return NO_RESULT
        return len(rows) > 0
