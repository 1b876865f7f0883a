"""HTTP fetches made on behalf of the front end.

HTML fragments, locale dictionaries and API calls all go through here.
A failed request never raises: it is logged and reported as None.
"""
import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class HttpFetcher:
    def __init__(self, base_url: str = '', session: requests.Session | None = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        if path.startswith(('http://', 'https://')):
            return path
        return f'{self.base_url}/{path.lstrip("/")}'

    def request(self, method: str, path: str, **kwargs) -> requests.Response | None:
        url = self.url_for(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            logger.warning(f'{method} {url} failed: {e}')
            return None

    def text(self, path: str) -> str | None:
        response = self.request('GET', path)
        return response.text if response is not None else None

    def json(self, path: str, method: str = 'GET', **kwargs):
        response = self.request(method, path, **kwargs)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f'{method} {self.url_for(path)} returned invalid JSON: {e}')
            return None
