"""List rendering and modal-form helpers for the wishlist and wish pages.

Containers and forms are BeautifulSoup tags. List items are rendered from the
Jinja2 templates in ``wishkeeper/templates``; user-facing text is Danish,
like the rest of the front end.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime

from bs4 import BeautifulSoup
from bs4.element import Tag
from jinja2 import Environment, PackageLoader, select_autoescape

from wishkeeper.client.dom import add_class, append_html, remove_class, set_html
from wishkeeper.helpers.validate import is_date, is_link, is_name, is_price, parse_number

logger = logging.getLogger(__name__)

DANISH_MONTHS = (
    'januar', 'februar', 'marts', 'april', 'maj', 'juni',
    'juli', 'august', 'september', 'oktober', 'november', 'december',
)

REQUIRED_MESSAGE = 'Dette felt skal udfyldes.'
TOO_LONG_MESSAGE = 'Teksten er for lang.'

# data-type of an input -> (check, error message)
FIELD_CHECKS = {
    'name': (is_name, 'Navnet er ikke gyldigt.'),
    'date': (is_date, 'Datoen er ikke gyldig.'),
    'price': (is_price, 'Prisen er ikke gyldig.'),
    'link': (is_link, 'Linket er ikke gyldigt.'),
}

SUBMIT_CREATE = '<span class="iconMD"> add </span>Opret'
SUBMIT_SAVE = '<span class="iconMD"> save </span>Gem'


def _to_datetime(value) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


def day_month(value) -> str:
    """'2024-12-24' -> '24. december'"""
    moment = _to_datetime(value)
    if moment is None:
        return ''
    return f'{moment.day}. {DANISH_MONTHS[moment.month - 1]}'


def full_datetime(value) -> str:
    """'2024-12-24T18:30:00' -> '24. december 2024 kl. 18.30'"""
    moment = _to_datetime(value)
    if moment is None:
        return ''
    return f'{day_month(moment)} {moment.year} kl. {moment.hour:02d}.{moment.minute:02d}'


def whole_kroner(value) -> int:
    try:
        return math.floor(float(value))
    except (TypeError, ValueError):
        return 0


env = Environment(
    loader=PackageLoader('wishkeeper', 'templates'),
    autoescape=select_autoescape(['html']),
)
env.filters['day_month'] = day_month
env.filters['full_datetime'] = full_datetime
env.filters['whole_kroner'] = whole_kroner


class Elements:
    """Behaviour shared by the wishlist and wish pages."""

    template_name = ''
    item_key = ''
    id_input_name = ''

    def __init__(self, api):
        self.api = api

    def create_list(self, container: Tag, items) -> int:
        """Replace the container's contents with one <li> per record."""
        container.clear()
        template = env.get_template(self.template_name)
        for item in items or []:
            append_html(container, template.render(**{self.item_key: item}))
        return len(items or [])

    def _show_edit_state(self, container: Tag, form: Tag, record_id) -> None:
        delete_button = container.find(id='delete')
        if delete_button is not None:
            remove_class(delete_button, 'hidden')
            delete_button['data-id'] = str(record_id)

        id_input = BeautifulSoup('', 'html.parser').new_tag(
            'input', attrs={'type': 'hidden', 'name': self.id_input_name, 'value': str(record_id)},
        )
        form.append(id_input)

        submit_button = container.find(id='submit')
        if submit_button is not None:
            set_html(submit_button, SUBMIT_SAVE)

    def close_form(self, container: Tag) -> None:
        """Hide the modal and put the form back in its "create" state."""
        add_class(container, 'hidden')

        for label in container.find_all('label'):
            remove_class(label, 'error')
            message = label.select_one('.errorMessage')
            if message is not None:
                message.clear()

        form = container.find('form')
        if form is not None:
            for field in form.find_all('input'):
                if field.get('type') != 'hidden' and field.has_attr('value'):
                    del field['value']
            id_input = form.find('input', attrs={'name': self.id_input_name})
            if id_input is not None:
                id_input.decompose()

        delete_button = container.find(id='delete')
        if delete_button is not None:
            add_class(delete_button, 'hidden')
            if delete_button.has_attr('data-id'):
                del delete_button['data-id']

        submit_button = container.find(id='submit')
        if submit_button is not None:
            set_html(submit_button, SUBMIT_CREATE)

    def validate_form(self, form: Tag) -> bool:
        """Check every labelled input and write inline error messages."""
        valid = True
        for label in form.find_all('label'):
            field = label.find('input')
            if field is None:
                continue
            message = label.select_one('.errorMessage')
            value = field.get('value', '')

            error = None
            if field.has_attr('required') and value == '':
                error = REQUIRED_MESSAGE
            elif field.get('maxlength', '').isdigit() and len(value) > int(field['maxlength']):
                error = TOO_LONG_MESSAGE
            elif field.get('data-type') in FIELD_CHECKS:
                check, failure = FIELD_CHECKS[field['data-type']]
                if not check(value):
                    error = failure

            if error:
                valid = False
                add_class(label, 'error')
            else:
                remove_class(label, 'error')
            if message is not None:
                message.string = error or ''
        return valid

    @staticmethod
    def form_values(form: Tag) -> dict:
        """Current input values keyed by name (or id), like FormData."""
        values = {}
        for field in form.find_all('input'):
            key = field.get('name') or field.get('id')
            if key:
                values[key] = field.get('value', '')
        return values

    @staticmethod
    def _succeeded(envelope, status: int) -> bool:
        return bool(envelope) and envelope.get('status') == status

    def submit_form(self, container: Tag) -> bool:
        """Validate the form, then create or update the record.

        Updates when the hidden id input is present, creates otherwise.
        Returns True when the page should reload.
        """
        form = container.find('form')
        if form is None or not self.validate_form(form):
            return False

        values = self.form_values(form)
        record_id = values.get(self.id_input_name)
        if record_id:
            logger.debug(f'Updating {self.item_key} {record_id}')
            return self._succeeded(self._update(int(record_id), values), 200)
        logger.debug(f'Creating {self.item_key}')
        return self._succeeded(self._create(values), 201)

    def delete(self, container: Tag) -> bool:
        """Delete the record the delete button points at; True when the page should reload."""
        button = container.find(id='delete')
        record_id = button.get('data-id') if button is not None else None
        if not record_id:
            return False
        logger.debug(f'Deleting {self.item_key} {record_id}')
        return self._succeeded(self._delete(container, int(record_id)), 200)

    def _create(self, values: dict):
        raise NotImplementedError

    def _update(self, record_id: int, values: dict):
        raise NotImplementedError

    def _delete(self, container: Tag, record_id: int):
        raise NotImplementedError


class WishlistElements(Elements):
    template_name = 'wishlist_item.html'
    item_key = 'wishlist'
    id_input_name = 'wishlistId'

    def open_form(self, container: Tag, wishlist_id: int | None = None, today: date | None = None) -> bool:
        """Show the modal, filled in from the API when editing.

        Returns False if the wishlist to edit could not be loaded; the page is
        expected to reload in that case.
        """
        remove_class(container, 'hidden')
        form = container.find('form')
        date_input = form.find(id='wishlistDate')
        date_input['value'] = (today or date.today()).isoformat()

        if wishlist_id is None:
            return True

        envelope = self.api.get(wishlist_id)
        if not envelope or not envelope.get('data'):
            return False

        record = envelope['data']
        form.find(id='wishlistName')['value'] = record['wishlist_name']
        date_input['value'] = str(record['wishlist_date'])[:10]
        self._show_edit_state(container, form, record['wishlist_id'])
        return True

    def edit(self, container: Tag, button: Tag) -> bool:
        """Open the form for the wishlist behind a list item's edit button."""
        return self.open_form(container, int(button['data-id']))

    def _create(self, values):
        return self.api.create(values['wishlistName'], values['wishlistDate'])

    def _update(self, record_id, values):
        return self.api.update(record_id, values['wishlistName'], values['wishlistDate'])

    def _delete(self, container, record_id):
        return self.api.delete(record_id)


class WishElements(Elements):
    template_name = 'wish_item.html'
    item_key = 'wish'
    id_input_name = 'wishId'

    def open_form(self, container: Tag, wishlist_id: int, wish_id: int | None = None) -> bool:
        remove_class(container, 'hidden')
        form = container.find('form')
        form.find(id='wishlistId')['value'] = str(wishlist_id)

        if wish_id is None:
            return True

        envelope = self.api.get(wishlist_id, wish_id)
        if not envelope or not envelope.get('data'):
            return False

        record = envelope['data']
        form.find(id='wishName')['value'] = record['wish_name']
        form.find(id='wishPrice')['value'] = str(record['wish_price'])
        form.find(id='wishLink')['value'] = record['wish_link']
        self._show_edit_state(container, form, record['wish_id'])
        return True

    def edit(self, container: Tag, wishlist_id: int, button: Tag) -> bool:
        return self.open_form(container, wishlist_id, int(button['data-id']))

    def _wish_fields(self, values):
        return values['wishName'], parse_number(values['wishPrice']).value, values['wishLink']

    def _create(self, values):
        return self.api.create(int(values['wishlistId']), *self._wish_fields(values))

    def _update(self, record_id, values):
        return self.api.update(int(values['wishlistId']), record_id, *self._wish_fields(values))

    def _delete(self, container, record_id):
        wishlist_id = container.find(id='wishlistId')['value']
        return self.api.delete(int(wishlist_id), record_id)
