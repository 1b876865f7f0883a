"""Client for the wishkeeper JSON API, as used by the front-end pages.

Each call returns the decoded response envelope, or None when the request
failed or came back with a non-success status.
"""
from wishkeeper.client.fetch import HttpFetcher

DEFAULT_API_URL = 'http://127.0.0.1:5000/'


class WishlistApi:
    def __init__(self, base_url: str = DEFAULT_API_URL, fetcher: HttpFetcher | None = None):
        self.fetcher = fetcher or HttpFetcher(base_url)

    def get_all(self):
        return self.fetcher.json('/wishlists')

    def get(self, wishlist_id: int):
        return self.fetcher.json(f'/wishlists/{wishlist_id}')

    def create(self, wishlist_name: str, wishlist_date: str):
        return self.fetcher.json('/wishlists', method='POST', json={
            'wishlist_name': wishlist_name,
            'wishlist_date': wishlist_date,
        })

    def update(self, wishlist_id: int, wishlist_name: str, wishlist_date: str):
        return self.fetcher.json(f'/wishlists/{wishlist_id}', method='PUT', json={
            'wishlist_name': wishlist_name,
            'wishlist_date': wishlist_date,
        })

    def delete(self, wishlist_id: int):
        return self.fetcher.json(f'/wishlists/{wishlist_id}', method='DELETE')


class WishApi:
    def __init__(self, base_url: str = DEFAULT_API_URL, fetcher: HttpFetcher | None = None):
        self.fetcher = fetcher or HttpFetcher(base_url)

    def get_all(self, wishlist_id: int):
        return self.fetcher.json(f'/wishlists/{wishlist_id}/wishes')

    def get(self, wishlist_id: int, wish_id: int):
        return self.fetcher.json(f'/wishlists/{wishlist_id}/wishes/{wish_id}')

    def create(self, wishlist_id: int, wish_name: str, wish_price, wish_link: str):
        return self.fetcher.json(f'/wishlists/{wishlist_id}/wishes', method='POST', json={
            'wish_name': wish_name,
            'wish_price': wish_price,
            'wish_link': wish_link,
        })

    def update(self, wishlist_id: int, wish_id: int, wish_name: str, wish_price, wish_link: str):
        return self.fetcher.json(f'/wishlists/{wishlist_id}/wishes/{wish_id}', method='PUT', json={
            'wish_name': wish_name,
            'wish_price': wish_price,
            'wish_link': wish_link,
        })

    def delete(self, wishlist_id: int, wish_id: int):
        return self.fetcher.json(f'/wishlists/{wishlist_id}/wishes/{wish_id}', method='DELETE')
