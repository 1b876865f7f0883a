"""Theme switcher.

The active theme is the class on the document's <html> element and is
remembered under ``siteTheme``. Without a stored choice the browser's colour
scheme preference picks between the two preferred themes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, MutableMapping
from dataclasses import dataclass

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

THEME_STORAGE_KEY = 'siteTheme'


class ThemeConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Theme:
    name: str
    label: str | None = None
    icon: str | None = None
    material_icon: str | None = None


DEFAULT_THEMES = (
    Theme('light', label='Light Theme'),
    Theme('dark', label='Dark Theme'),
)


class ThemeSwitcher:
    def __init__(
        self,
        document: BeautifulSoup,
        themes: Iterable[Theme] = DEFAULT_THEMES,
        preferred_themes: Iterable[str] = ('light', 'dark'),
        *,
        storage: MutableMapping | None = None,
        prefers_dark: bool = False,
        button_id: str = 'themeSwitcher',
        on_theme_change: Callable[[str], None] | None = None,
    ):
        self.document = document
        self.themes = list(themes)
        self.preferred_themes = list(preferred_themes)
        self.storage = storage if storage is not None else {}
        self.prefers_dark = prefers_dark
        self.button_id = button_id
        self.on_theme_change = on_theme_change

        self.validate()

    def _find(self, name):
        return next((t for t in self.themes if t.name == name), None)

    def validate(self) -> None:
        if len(self.themes) < 2:
            raise ThemeConfigError('There must be at least two themes')
        for theme in self.themes:
            if not theme.name:
                raise ThemeConfigError('Theme name cannot be empty')
            if theme.icon and theme.material_icon:
                raise ThemeConfigError(f'Theme cannot have both icon and material_icon [theme: {theme.name}]')
            if theme.label and theme.material_icon:
                raise ThemeConfigError(f'Theme cannot have both label and material_icon [theme: {theme.name}]')

        if len(self.preferred_themes) < 2:
            raise ThemeConfigError('There must be at least two preferred themes')
        if len(self.preferred_themes) > 2:
            logger.warning('More than two preferred themes given, only the first two are used')
        for name in self.preferred_themes:
            if self._find(name) is None:
                raise ThemeConfigError(f'Preferred theme does not exist [theme: {name}]')

    def get_theme(self) -> str:
        classes = self.document.html.get('class') or []
        return ' '.join(classes) if isinstance(classes, list) else classes

    def set_theme(self, name: str) -> bool:
        if self._find(name) is None:
            return False
        self.document.html['class'] = name
        self.storage[THEME_STORAGE_KEY] = name
        if self.on_theme_change is not None:
            self.on_theme_change(name)
        return True

    def preferred_theme(self) -> str:
        return self.preferred_themes[1] if self.prefers_dark else self.preferred_themes[0]

    def init(self) -> str:
        """Apply the stored (or preferred) theme; returns the active theme."""
        stored = self.storage.get(THEME_STORAGE_KEY)
        if not (stored and self.set_theme(stored)):
            self.set_theme(self.preferred_theme())
        self.update_button()
        return self.get_theme()

    def toggle(self) -> str:
        """Button click: move on to the next theme."""
        names = [t.name for t in self.themes]
        current = self.get_theme()
        if current in names:
            self.set_theme(names[(names.index(current) + 1) % len(names)])
            self.update_button()
        return self.get_theme()

    def update_button(self) -> None:
        button = self.document.find(id=self.button_id)
        theme = self._find(self.get_theme())
        if button is None or theme is None:
            return

        button.clear()
        if theme.label and theme.icon:
            button.append(self.document.new_tag('img', attrs={'src': theme.icon, 'alt': theme.label}))
        elif theme.material_icon:
            button.string = theme.material_icon
        elif theme.label:
            button.string = theme.label
        else:
            button.string = 'Theme Switcher'
