"""Single-page router for the wishkeeper front end.

The router owns the current route and, when locales are configured, the
current locale. Links carrying the router-link class are intercepted and
resolved against the route table; the matching HTML fragment is fetched and
swapped into the root container of the page.

Locale resolution order:
1. a configured locale code as the first path segment
2. the stored preference (``siteLanguage``)
3. the first browser language whose primary subtag is configured
4. the configured default locale

Fragments can resolve out of order when navigations overlap. Every navigation
carries a sequence number and only the newest one is allowed to render.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable, MutableMapping
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag

from wishkeeper.client.dom import has_class, set_html

logger = logging.getLogger(__name__)

LOCALE_STORAGE_KEY = 'siteLanguage'
TRANSLATE_ATTRIBUTE = 'data-lang-id'


class RouterConfigError(ValueError):
    """Route or locale table that the router cannot work with."""


class RouterState(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    RESOLVING_LOCALE = 'resolving-locale'
    RENDERING = 'rendering'
    IDLE = 'idle'


@dataclass(frozen=True)
class Route:
    route: str
    component: str
    default: bool = False


@dataclass(frozen=True)
class Locale:
    code: str
    default: bool = False
    icon: str | None = None


@dataclass(frozen=True)
class Navigation:
    sequence: int
    route: Route
    url: str


def normalize_path(path: str | None) -> str:
    """'/about/' -> '/about', '' -> '/', 'about?x=1' -> '/about'"""
    path = (path or '').split('?', 1)[0].split('#', 1)[0].strip()
    segments = [s for s in path.split('/') if s]
    return '/' + '/'.join(segments)


def _single_default(items, kind: str):
    defaults = [item for item in items if item.default]
    if len(defaults) != 1:
        raise RouterConfigError(f'Exactly one default {kind} is required, got {len(defaults)}')
    return defaults[0]


class Router:
    def __init__(
        self,
        document: BeautifulSoup,
        routes: Iterable[Route],
        *,
        fetcher,
        storage: MutableMapping | None = None,
        root_id: str = 'root',
        router_link_class: str = 'routerLink',
        locales: Iterable[Locale] | None = None,
        locale_link_class: str = 'languageSwitcher',
        browser_languages: Iterable[str] = (),
        location: str = '/',
        origin: str = '',
        fragment_path: str = '/components/{component}.html',
        locale_path: str = '/assets/lang/{code}.json',
        on_reload: Callable[[], None] | None = None,
    ):
        if not root_id:
            raise RouterConfigError('root_id is required')
        if not router_link_class:
            raise RouterConfigError('router_link_class is required')

        self.routes = [Route(normalize_path(r.route), r.component, r.default) for r in routes]
        if not self.routes:
            raise RouterConfigError('At least one route is required')
        paths = [r.route for r in self.routes]
        if len(set(paths)) != len(paths):
            raise RouterConfigError('Route paths must be unique')
        self.default_route = _single_default(self.routes, 'route')

        self.locales = list(locales) if locales else []
        self.default_locale = None
        if self.locales:
            codes = [loc.code for loc in self.locales]
            if len(set(codes)) != len(codes):
                raise RouterConfigError('Locale codes must be unique')
            if not locale_link_class:
                raise RouterConfigError('locale_link_class is required when locales are configured')
            self.default_locale = _single_default(self.locales, 'locale')

        self.document = document
        self.root = document.find(id=root_id)
        if self.root is None:
            raise RouterConfigError(f'No element with id "{root_id}" in the document')

        self.fetcher = fetcher
        self.storage = storage if storage is not None else {}
        self.router_link_class = router_link_class
        self.locale_link_class = locale_link_class
        self.browser_languages = list(browser_languages)
        self.location = location
        self.origin = origin.rstrip('/')
        self.fragment_path = fragment_path
        self.locale_path = locale_path
        self.on_reload = on_reload

        self.state = RouterState.UNINITIALIZED
        self.current_route: Route | None = None
        self.current_locale: str | None = None
        self.dictionary: dict | None = None
        self.history: list[str] = []
        self._sequence = 0

    # ── lookups ─────────────────────────────────────────────────────

    @property
    def locale_codes(self) -> list[str]:
        return [loc.code for loc in self.locales]

    def _split_locale(self, path: str) -> tuple[str | None, str]:
        """Split '/en/about' into ('en', '/about') when 'en' is configured."""
        path = normalize_path(path)
        segments = [s for s in path.split('/') if s]
        if segments and segments[0] in self.locale_codes:
            return segments[0], '/' + '/'.join(segments[1:])
        return None, path

    def resolve_route(self, path: str) -> Route:
        """Exact match on the route table, falling back to the default route."""
        _, bare = self._split_locale(path)
        for route in self.routes:
            if route.route == bare:
                return route
        return self.default_route

    def resolve_locale(self, path: str | None = None) -> str | None:
        if not self.locales:
            return None

        prefix, _ = self._split_locale(path if path is not None else self.location)
        if prefix:
            return prefix

        stored = self.storage.get(LOCALE_STORAGE_KEY)
        if stored in self.locale_codes:
            return stored

        for language in self.browser_languages:
            code = language.split('-')[0].lower()
            if code in self.locale_codes:
                return code

        return self.default_locale.code

    def fragment_url(self, route: Route) -> str:
        return self.fragment_path.format(component=route.component)

    def public_path(self, route: Route, locale: str | None = None) -> str:
        """Path shown in the address bar, locale-prefixed when locales are on."""
        locale = locale or self.current_locale
        if not locale:
            return route.route
        return f'/{locale}' + ('' if route.route == '/' else route.route)

    # ── page load ───────────────────────────────────────────────────

    def start(self) -> bool:
        """Initial render of the page, run once the document is ready."""
        if self.state is not RouterState.UNINITIALIZED:
            raise RuntimeError('Router already started')

        if self.locales:
            self.state = RouterState.RESOLVING_LOCALE
            self.set_locale(self.resolve_locale(self.location))
        return self.navigate(self.location)

    # ── navigation ──────────────────────────────────────────────────

    def click(self, element: Tag) -> bool:
        """Handle a click; returns True when default navigation is suppressed."""
        if self.locales and has_class(element, self.locale_link_class):
            prefix, _ = self._split_locale(element.get('href', ''))
            code = element.get('data-locale') or prefix
            if code not in self.locale_codes:
                code = self.next_locale()
            self.set_locale(code)
            return True
        if has_class(element, self.router_link_class):
            href = element.get('href')
            if href:
                self.navigate(href)
            return True
        return False

    def begin_navigation(self, path: str) -> Navigation:
        """Record the new route and push it to history; rendering comes later."""
        route = self.resolve_route(path)
        self._sequence += 1
        self.state = RouterState.RENDERING
        self.current_route = route
        self.history.append(self.public_path(route))
        self.inject_alternate_links()
        return Navigation(self._sequence, route, self.fragment_url(route))

    def complete(self, navigation: Navigation, html: str | None) -> bool:
        """Swap a fetched fragment into the root container.

        Returns True if the fragment was rendered. Fragments from superseded
        navigations are dropped; a failed fetch triggers the reload fallback.
        """
        if navigation.sequence != self._sequence:
            logger.debug(
                f'Dropping fragment for {navigation.route.route} '
                f'(navigation #{navigation.sequence}, latest #{self._sequence})'
            )
            return False

        self.state = RouterState.IDLE
        if html is None:
            logger.warning(f'Could not load {navigation.url}, reloading page')
            if self.on_reload is not None:
                self.on_reload()
            return False

        set_html(self.root, html)
        if self.dictionary is not None:
            self.apply_dictionary(self.root)
        if self.locales:
            self.sync_locale_links()
        return True

    def navigate(self, path: str) -> bool:
        navigation = self.begin_navigation(path)
        return self.complete(navigation, self.fetcher.text(navigation.url))

    # ── locales ─────────────────────────────────────────────────────

    def next_locale(self) -> str:
        codes = self.locale_codes
        index = codes.index(self.current_locale) if self.current_locale in codes else -1
        return codes[(index + 1) % len(codes)]

    def set_locale(self, code: str) -> None:
        if code not in self.locale_codes:
            raise RouterConfigError(f'Unknown locale "{code}"')

        self.storage[LOCALE_STORAGE_KEY] = code
        self.current_locale = code

        dictionary = self.fetcher.json(self.locale_path.format(code=code))
        if isinstance(dictionary, dict):
            self.dictionary = dictionary
            self.apply_dictionary(self.document)
        else:
            logger.warning(f'No usable locale dictionary for "{code}"')
            self.dictionary = None

        self.sync_locale_links()
        if self.current_route is not None:
            self.history.append(self.public_path(self.current_route))
            self.inject_alternate_links()

    def apply_dictionary(self, node: Tag) -> int:
        """Translate every marked element under node; returns how many changed."""
        if not self.dictionary:
            return 0

        changed = 0
        for element in node.select(f'[{TRANSLATE_ATTRIBUTE}]'):
            entry = self.dictionary.get(element.get(TRANSLATE_ATTRIBUTE))
            if not isinstance(entry, dict):
                continue

            content = entry.get('content', entry.get('text'))
            if content is not None:
                set_html(element, str(content))
            aria_label = entry.get('ariaLabel', entry.get('aria-label'))
            if aria_label is not None:
                element['aria-label'] = aria_label
            if entry.get('alt') is not None:
                element['alt'] = entry['alt']
            changed += 1
        return changed

    def sync_locale_links(self) -> None:
        """Point every locale link at the next locale, on the current route."""
        if not self.locales or self.current_locale is None:
            return

        code = self.next_locale()
        route = self.current_route or self.default_route
        icon = next(loc.icon for loc in self.locales if loc.code == code)
        for link in self.document.select(f'.{self.locale_link_class}'):
            link['href'] = self.public_path(route, code)
            link['data-locale'] = code
            img = link.find('img')
            if icon and img is not None:
                img['src'] = icon
                img['alt'] = code

    def inject_alternate_links(self) -> None:
        """One <link rel="alternate" hreflang=...> per locale other than the current one."""
        if not self.locales or self.current_route is None:
            return
        head = self.document.head
        if head is None:
            return

        for link in head.select('link[rel="alternate"][hreflang]'):
            link.decompose()
        for code in self.locale_codes:
            if code == self.current_locale:
                continue
            head.append(self.document.new_tag(
                'link',
                attrs={
                    'rel': 'alternate',
                    'hreflang': code,
                    'href': self.origin + self.public_path(self.current_route, code),
                },
            ))
