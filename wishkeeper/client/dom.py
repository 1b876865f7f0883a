"""Small BeautifulSoup helpers mirroring the browser DOM calls the front end uses."""
from bs4 import BeautifulSoup
from bs4.element import Tag


def _classes(tag: Tag) -> list[str]:
    classes = tag.get('class') or []
    return classes.split() if isinstance(classes, str) else list(classes)


def has_class(tag: Tag, name: str) -> bool:
    return name in _classes(tag)


def add_class(tag: Tag, name: str) -> None:
    classes = _classes(tag)
    if name not in classes:
        tag['class'] = classes + [name]


def remove_class(tag: Tag, name: str) -> None:
    tag['class'] = [c for c in _classes(tag) if c != name]


def append_html(tag: Tag, html: str) -> None:
    fragment = BeautifulSoup(html, 'html.parser')
    for child in list(fragment.contents):
        tag.append(child.extract())


def set_html(tag: Tag, html: str) -> None:
    """Equivalent of ``element.innerHTML = html``."""
    tag.clear()
    append_html(tag, html)
