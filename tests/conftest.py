import itertools
from datetime import datetime, timedelta

import pytest
from bs4 import BeautifulSoup

from wishkeeper import create_app
from wishkeeper.config import TestingConfig
from wishkeeper.helpers.db import NO_RESULT


class FakeConnector:
    """In-memory stand-in for helpers.db.Connector.

    Understands exactly the statements issued by the services and records
    every call. Statements containing any substring in `fail_on` return
    NO_RESULT, like a driver failure would.
    """

    def __init__(self):
        self.wishlists = {}
        self.wishes = {}
        self.calls = []
        self.fail_on = []
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def now(self):
        return (datetime(2024, 1, 1) + timedelta(seconds=next(self._ticks))).isoformat()

    def query(self, sql):
        return self.prepared_query(sql, ())

    def prepared_query(self, sql, values):
        sql = ' '.join(sql.split())
        values = tuple(values)
        self.calls.append((sql, values))
        if any(marker in sql for marker in self.fail_on):
            return NO_RESULT

        if sql.startswith('SELECT * FROM wishlists'):
            if values:
                row = self.wishlists.get(values[0])
                return [dict(row)] if row else []
            return [dict(r) for r in self.wishlists.values()]
        if sql.startswith('SELECT wishlist_id FROM wishlists'):
            return [{'wishlist_id': values[0]}] if values[0] in self.wishlists else []
        if sql.startswith('INSERT INTO wishlists'):
            new_id = next(self._ids)
            self.wishlists[new_id] = {
                'wishlist_id': new_id,
                'wishlist_name': values[0],
                'wishlist_date': values[1],
                'wishlist_last_updated': self.now(),
            }
            return {'insert_id': new_id, 'affected_rows': 1}
        if sql.startswith('UPDATE wishlists SET wishlist_last_updated'):
            return self._update(self.wishlists.get(values[0]), wishlist_last_updated=self.now())
        if sql.startswith('UPDATE wishlists'):
            return self._update(
                self.wishlists.get(values[2]),
                wishlist_name=values[0], wishlist_date=values[1], wishlist_last_updated=self.now(),
            )
        if sql.startswith('DELETE FROM wishlists'):
            removed = self.wishlists.pop(values[0], None)
            if removed:
                self.wishes = {k: w for k, w in self.wishes.items() if w['wishlist_id'] != values[0]}
            return {'insert_id': 0, 'affected_rows': 1 if removed else 0}

        if sql.startswith('SELECT * FROM wishes WHERE wishlist_id = %s AND wish_id = %s'):
            row = self._wish(*values)
            return [dict(row)] if row else []
        if sql.startswith('SELECT * FROM wishes'):
            return [dict(w) for w in self.wishes.values() if w['wishlist_id'] == values[0]]
        if sql.startswith('SELECT wish_id FROM wishes'):
            return [{'wish_id': values[1]}] if self._wish(*values) else []
        if sql.startswith('INSERT INTO wishes'):
            new_id = next(self._ids)
            self.wishes[new_id] = {
                'wish_id': new_id,
                'wishlist_id': values[0],
                'wish_name': values[1],
                'wish_price': float(values[2]),
                'wish_link': values[3],
                'wish_last_updated': self.now(),
            }
            return {'insert_id': new_id, 'affected_rows': 1}
        if sql.startswith('UPDATE wishes'):
            return self._update(
                self._wish(values[3], values[4]),
                wish_name=values[0], wish_price=float(values[1]), wish_link=values[2],
                wish_last_updated=self.now(),
            )
        if sql.startswith('DELETE FROM wishes'):
            row = self._wish(*values)
            if row:
                del self.wishes[row['wish_id']]
            return {'insert_id': 0, 'affected_rows': 1 if row else 0}

        raise AssertionError(f'Unexpected statement: {sql}')

    def _wish(self, wishlist_id, wish_id):
        row = self.wishes.get(wish_id)
        return row if row and row['wishlist_id'] == wishlist_id else None

    @staticmethod
    def _update(row, **changes):
        if row is None:
            return {'insert_id': 0, 'affected_rows': 0}
        row.update(changes)
        return {'insert_id': 0, 'affected_rows': 1}


class FakeFetcher:
    """Serves canned fragment/locale responses and records requested paths."""

    def __init__(self, pages=None, dictionaries=None):
        self.pages = pages or {}
        self.dictionaries = dictionaries or {}
        self.requested = []

    def text(self, path):
        self.requested.append(path)
        return self.pages.get(path)

    def json(self, path, method='GET', **kwargs):
        self.requested.append(path)
        return self.dictionaries.get(path)


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def app(connector):
    return create_app(TestingConfig, connector=connector)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def page():
    return BeautifulSoup(
        '<!doctype html><html><head><title>Wishkeeper</title></head><body>'
        '<nav>'
        '<a class="routerLink" href="/home">Home</a>'
        '<a class="routerLink" href="/about">About</a>'
        '<a class="languageSwitcher" href="#"><img src="" alt=""></a>'
        '</nav>'
        '<h1 data-lang-id="title">Ønskelister</h1>'
        '<div id="root"></div>'
        '</body></html>',
        'html.parser',
    )
