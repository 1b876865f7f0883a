from datetime import date

import pytest
from bs4 import BeautifulSoup

from wishkeeper.client.dom import has_class
from wishkeeper.client.elements import (
    REQUIRED_MESSAGE,
    TOO_LONG_MESSAGE,
    WishElements,
    WishlistElements,
    day_month,
    full_datetime,
)

WISHLIST_MODAL = '''
<div id="modal" class="modal hidden">
  <form id="wishlistForm">
    <label>Navn <input id="wishlistName" name="wishlistName" data-type="name" required>
      <span class="errorMessage"></span></label>
    <label>Dato <input id="wishlistDate" name="wishlistDate" type="date" data-type="date" required>
      <span class="errorMessage"></span></label>
  </form>
  <button id="delete" class="hidden">Slet</button>
  <button id="submit"><span class="iconMD"> add </span>Opret</button>
</div>
'''

WISH_MODAL = '''
<div id="modal" class="hidden">
  <form id="wishForm">
    <input id="wishlistId" name="wishlistId" type="hidden">
    <label>Navn <input id="wishName" data-type="name" required><span class="errorMessage"></span></label>
    <label>Pris <input id="wishPrice" data-type="price" required><span class="errorMessage"></span></label>
    <label>Link <input id="wishLink" data-type="link" required><span class="errorMessage"></span></label>
  </form>
  <button id="delete" class="hidden">Slet</button>
  <button id="submit">Opret</button>
</div>
'''


class StubApi:
    def __init__(self, record=None):
        self.record = record
        self.calls = []

    def get(self, *ids):
        self.calls.append(ids)
        return {'status': 200, 'data': self.record} if self.record else None

    def create(self, *args):
        self.calls.append(('create',) + args)
        return {'status': 201}

    def update(self, *args):
        self.calls.append(('update',) + args)
        return {'status': 200}

    def delete(self, *ids):
        self.calls.append(('delete',) + ids)
        return {'status': 200} if self.record else None


def _modal(html):
    return BeautifulSoup(html, 'html.parser').find(id='modal')


def test_danish_dates():
    assert day_month('2024-12-24') == '24. december'
    assert full_datetime('2024-03-05T08:07:00') == '5. marts 2024 kl. 08.07'
    assert full_datetime('garbage') == ''


def test_create_wishlist_list():
    container = BeautifulSoup('<ul id="wishlists"><li>old</li></ul>', 'html.parser').ul
    wishlists = [
        {'wishlist_id': 3, 'wishlist_name': 'Jul', 'wishlist_date': '2024-12-24',
         'wishlist_last_updated': '2024-12-01T10:15:00'},
        {'wishlist_id': 4, 'wishlist_name': 'Fødselsdag', 'wishlist_date': '2025-06-01',
         'wishlist_last_updated': '2025-01-02T09:00:00'},
    ]

    assert WishlistElements(StubApi()).create_list(container, wishlists) == 2

    items = container.find_all('li')
    assert len(items) == 2
    assert items[0].button['data-id'] == '3'
    assert items[0].a['href'] == 'wishlist.html?id=3'
    assert items[0].h3.get_text() == 'Jul'
    assert '24. december' in items[0].select_one('.date').get_text()
    assert '1. december 2024 kl. 10.15' in items[0].select_one('.lastUpdated').get_text()


def test_create_wish_list_escapes_names_and_floors_price():
    container = BeautifulSoup('<ul></ul>', 'html.parser').ul
    wishes = [{'wish_id': 9, 'wish_name': '<b>Bog</b>', 'wish_price': 149.95,
               'wish_link': 'https://example.com/bog', 'wish_last_updated': '2024-01-01T12:00:00'}]

    WishElements(StubApi()).create_list(container, wishes)

    item = container.li
    assert item.h3.get_text() == '<b>Bog</b>'
    assert item.h3.b is None
    assert item.select_one('.price').get_text() == '149 kr.'
    assert item.a['target'] == '_blank'


def test_open_wishlist_form_for_create():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi()

    assert WishlistElements(api).open_form(modal, today=date(2024, 2, 3))
    assert not has_class(modal, 'hidden')
    assert modal.find(id='wishlistDate')['value'] == '2024-02-03'
    assert api.calls == []


def test_open_and_close_wishlist_form_for_edit():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi({'wishlist_id': 5, 'wishlist_name': 'Jul', 'wishlist_date': '2024-12-24',
                   'wishlist_last_updated': '2024-12-01T10:00:00'})
    elements = WishlistElements(api)

    assert elements.open_form(modal, 5)
    assert modal.find(id='wishlistName')['value'] == 'Jul'
    assert modal.find(id='wishlistDate')['value'] == '2024-12-24'
    assert modal.find(id='delete')['data-id'] == '5'
    assert not has_class(modal.find(id='delete'), 'hidden')
    assert modal.find('input', attrs={'name': 'wishlistId', 'type': 'hidden'})['value'] == '5'
    assert 'Gem' in modal.find(id='submit').get_text()

    elements.close_form(modal)
    assert has_class(modal, 'hidden')
    assert not modal.find(id='wishlistName').has_attr('value')
    assert modal.find('input', attrs={'name': 'wishlistId'}) is None
    assert not modal.find(id='delete').has_attr('data-id')
    assert 'Opret' in modal.find(id='submit').get_text()


def test_open_form_reports_missing_record():
    modal = _modal(WISH_MODAL)
    assert not WishElements(StubApi()).open_form(modal, 1, 42)


def test_open_wish_form_for_edit():
    modal = _modal(WISH_MODAL)
    api = StubApi({'wish_id': 8, 'wishlist_id': 1, 'wish_name': 'Bog', 'wish_price': 99.5,
                   'wish_link': 'https://example.com'})

    assert WishElements(api).open_form(modal, 1, 8)
    assert api.calls == [(1, 8)]
    assert modal.find(id='wishlistId')['value'] == '1'
    assert modal.find(id='wishPrice')['value'] == '99.5'
    assert modal.find('input', attrs={'name': 'wishId'})['value'] == '8'


@pytest.mark.parametrize('name,price,link,errors', [
    ('Bog', '100', 'https://example.com', {}),
    ('', '100', 'https://example.com', {'wishName': REQUIRED_MESSAGE}),
    ("O'Bog", '100', 'https://example.com', {'wishName': 'Navnet er ikke gyldigt.'}),
    ('Bog', 'mange', 'https://example.com', {'wishPrice': 'Prisen er ikke gyldig.'}),
    ('Bog', '100', 'example', {'wishLink': 'Linket er ikke gyldigt.'}),
])
def test_validate_wish_form(name, price, link, errors):
    form = _modal(WISH_MODAL).form
    form.find(id='wishName')['value'] = name
    form.find(id='wishPrice')['value'] = price
    form.find(id='wishLink')['value'] = link

    assert WishElements(StubApi()).validate_form(form) is (not errors)

    for label in form.find_all('label'):
        field_id = label.input['id']
        message = label.select_one('.errorMessage').get_text()
        assert message == errors.get(field_id, '')
        assert has_class(label, 'error') is (field_id in errors)


def test_validate_wishlist_form_checks_dates():
    form = _modal(WISHLIST_MODAL).form
    form.find(id='wishlistName')['value'] = 'Jul'
    form.find(id='wishlistDate')['value'] = '2024-02-30'

    assert not WishlistElements(StubApi()).validate_form(form)
    date_label = form.find(id='wishlistDate').find_parent('label')
    assert date_label.select_one('.errorMessage').get_text() == 'Datoen er ikke gyldig.'


def test_submit_creates_a_new_wishlist():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi()
    elements = WishlistElements(api)
    elements.open_form(modal, today=date(2024, 12, 1))
    modal.find(id='wishlistName')['value'] = 'Jul'

    assert elements.submit_form(modal)
    assert api.calls == [('create', 'Jul', '2024-12-01')]


def test_submit_updates_when_editing():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi({'wishlist_id': 5, 'wishlist_name': 'Jul', 'wishlist_date': '2024-12-24'})
    elements = WishlistElements(api)
    elements.open_form(modal, 5)
    modal.find(id='wishlistName')['value'] = 'Påske'

    assert elements.submit_form(modal)
    assert api.calls[-1] == ('update', 5, 'Påske', '2024-12-24')


def test_invalid_form_is_not_submitted():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi()
    elements = WishlistElements(api)
    elements.open_form(modal)

    assert not elements.submit_form(modal)
    assert api.calls == []


def test_maxlength_is_enforced():
    modal = _modal(WISHLIST_MODAL)
    name = modal.find(id='wishlistName')
    name['maxlength'] = '50'
    name['value'] = 'x' * 51
    modal.find(id='wishlistDate')['value'] = '2024-12-24'

    assert not WishlistElements(StubApi()).validate_form(modal.form)
    assert name.find_parent('label').select_one('.errorMessage').get_text() == TOO_LONG_MESSAGE


def test_submit_and_delete_wish():
    modal = _modal(WISH_MODAL)
    api = StubApi({'wish_id': 8, 'wishlist_id': 1, 'wish_name': 'Bog', 'wish_price': 99.5,
                   'wish_link': 'https://example.com'})
    elements = WishElements(api)

    assert elements.open_form(modal, 1, 8)
    assert elements.submit_form(modal)
    assert api.calls[-1] == ('update', 1, 8, 'Bog', 99.5, 'https://example.com')

    assert elements.delete(modal)
    assert api.calls[-1] == ('delete', 1, 8)


def test_submit_new_wish():
    modal = _modal(WISH_MODAL)
    api = StubApi()
    elements = WishElements(api)
    elements.open_form(modal, 3)
    modal.find(id='wishName')['value'] = 'Bog'
    modal.find(id='wishPrice')['value'] = '100'
    modal.find(id='wishLink')['value'] = 'https://example.com'

    assert elements.submit_form(modal)
    assert api.calls == [('create', 3, 'Bog', 100, 'https://example.com')]


def test_delete_wishlist_from_edit_form():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi({'wishlist_id': 5, 'wishlist_name': 'Jul', 'wishlist_date': '2024-12-24'})
    elements = WishlistElements(api)
    elements.open_form(modal, 5)

    assert elements.delete(modal)
    assert api.calls[-1] == ('delete', 5)


def test_delete_without_record_does_nothing():
    modal = _modal(WISHLIST_MODAL)
    api = StubApi()

    assert not WishlistElements(api).delete(modal)
    assert api.calls == []


def test_failed_delete_does_not_reload():
    modal = _modal(WISHLIST_MODAL)
    modal.find(id='delete')['data-id'] = '5'
    assert not WishlistElements(StubApi()).delete(modal)


def test_edit_button_opens_the_form():
    container = BeautifulSoup('<ul></ul>', 'html.parser').ul
    record = {'wishlist_id': 7, 'wishlist_name': 'Jul', 'wishlist_date': '2024-12-24',
              'wishlist_last_updated': '2024-12-01T10:00:00'}
    api = StubApi(record)
    elements = WishlistElements(api)
    elements.create_list(container, [record])
    modal = _modal(WISHLIST_MODAL)

    assert elements.edit(modal, container.button)
    assert api.calls == [(7,)]
    assert modal.find(id='wishlistName')['value'] == 'Jul'
