"""
JSON API for wishlists and their wishes.
Every response, success or failure, uses the same envelope:
{status, message, date, data?}
"""
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from wishkeeper.helpers.db import NO_RESULT, get_connector
from wishkeeper.helpers.validate import parse_date, parse_id, parse_link, parse_name, parse_price
from wishkeeper.services.wish_service import Wish
from wishkeeper.services.wishlist_service import Wishlist

api_bp = Blueprint('api', __name__)

# Column widths in schema.sql
WISHLIST_NAME_MAX_LENGTH = 50
WISH_NAME_MAX_LENGTH = 100

_NO_DATA = object()


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-31T12:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def send_response(status: int, message: str, data=_NO_DATA):
    body = {
        'status': status,
        'message': message,
        'date': utc_timestamp(),
    }
    if data is not _NO_DATA:
        body['data'] = data
    return jsonify(body), status


def get_json_payload() -> dict:
    """Return a JSON object body as dict; anything else reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bad_request(field: str, reason: str):
    return send_response(400, f'Bad request: {field} {reason}.')


def _server_error():
    return send_response(500, 'Internal server error.')


def _first_invalid(checks):
    """Return a 400 response for the first failed (field, Validation) pair, else None."""
    for field, result in checks:
        if not result:
            return _bad_request(field, result.reason)
    return None


def _wishlists() -> Wishlist:
    return Wishlist(get_connector())


def _wishes() -> Wish:
    return Wish(get_connector())


def _require_wishlist(wishlists: Wishlist, wishlist_id: int):
    found = wishlists.exists(wishlist_id)
    if found is NO_RESULT:
        return _server_error()
    if not found:
        return send_response(404, 'Wishlist not found.')
    return None


def _require_wish(wishes: Wish, wishlist_id: int, wish_id: int):
    found = wishes.exists(wishlist_id, wish_id)
    if found is NO_RESULT:
        return _server_error()
    if not found:
        return send_response(404, 'Wish not found.')
    return None


def _touch_wishlist(wishlists: Wishlist, wishlist_id: int) -> None:
    if wishlists.touch(wishlist_id) is NO_RESULT:
        # The wish change itself is committed; only the timestamp lags behind.
        current_app.logger.warning(f'Could not bump last-updated of wishlist {wishlist_id}')


def _wish_fields(data: dict):
    name = parse_name(data.get('wish_name'), WISH_NAME_MAX_LENGTH)
    price = parse_price(data.get('wish_price'))
    link = parse_link(data.get('wish_link'))
    return name, price, link


# ═══════════════════════════════════════════════════════════════════
#  PING — liveness probe
#     GET /ping
# ═══════════════════════════════════════════════════════════════════
@api_bp.route('/ping')
def ping():
    return send_response(200, 'Pong!')


# ═══════════════════════════════════════════════════════════════════
#  1. WISHLISTS
#     GET    /wishlists
#     GET    /wishlists/<wishlist_id>
#     POST   /wishlists                 { wishlist_name, wishlist_date }
#     PUT    /wishlists/<wishlist_id>   { wishlist_name, wishlist_date }
#     DELETE /wishlists/<wishlist_id>
# ═══════════════════════════════════════════════════════════════════
@api_bp.route('/wishlists', methods=['GET'])
def list_wishlists():
    result = _wishlists().get_all()
    if result is NO_RESULT:
        return _server_error()
    return send_response(200, 'Fetched wishlists.', result)


@api_bp.route('/wishlists/<wishlist_id>', methods=['GET'])
def get_wishlist(wishlist_id):
    wid = parse_id(wishlist_id)
    if not wid:
        return _bad_request('wishlist_id', wid.reason)

    wishlists = _wishlists()
    missing = _require_wishlist(wishlists, wid.value)
    if missing:
        return missing

    result = wishlists.get(wid.value)
    if result is NO_RESULT:
        return _server_error()
    if result is None:
        # Deleted between the existence check and the read
        return send_response(404, 'Wishlist not found.')
    return send_response(200, 'Fetched wishlist.', result)


@api_bp.route('/wishlists', methods=['POST'])
def create_wishlist():
    data = get_json_payload()
    name = parse_name(data.get('wishlist_name'), WISHLIST_NAME_MAX_LENGTH)
    wdate = parse_date(data.get('wishlist_date'))

    invalid = _first_invalid([('wishlist_name', name), ('wishlist_date', wdate)])
    if invalid:
        return invalid

    result = _wishlists().create(name.value, wdate.value)
    if result is NO_RESULT:
        return _server_error()
    return send_response(201, 'Created wishlist.', result)


@api_bp.route('/wishlists/<wishlist_id>', methods=['PUT'])
def update_wishlist(wishlist_id):
    data = get_json_payload()
    wid = parse_id(wishlist_id)
    name = parse_name(data.get('wishlist_name'), WISHLIST_NAME_MAX_LENGTH)
    wdate = parse_date(data.get('wishlist_date'))

    invalid = _first_invalid([('wishlist_id', wid), ('wishlist_name', name), ('wishlist_date', wdate)])
    if invalid:
        return invalid

    wishlists = _wishlists()
    missing = _require_wishlist(wishlists, wid.value)
    if missing:
        return missing

    result = wishlists.update(wid.value, name.value, wdate.value)
    if result is NO_RESULT:
        return _server_error()
    return send_response(200, 'Updated wishlist.', result)


@api_bp.route('/wishlists/<wishlist_id>', methods=['DELETE'])
def delete_wishlist(wishlist_id):
    wid = parse_id(wishlist_id)
    if not wid:
        return _bad_request('wishlist_id', wid.reason)

    wishlists = _wishlists()
    missing = _require_wishlist(wishlists, wid.value)
    if missing:
        return missing

    result = wishlists.delete(wid.value)
    if result is NO_RESULT:
        return _server_error()
    return send_response(200, 'Deleted wishlist.', result)


# ═══════════════════════════════════════════════════════════════════
#  2. WISHES — scoped under their wishlist; every change bumps the
#     wishlist's last-updated timestamp
#     GET    /wishlists/<wishlist_id>/wishes
#     GET    /wishlists/<wishlist_id>/wishes/<wish_id>
#     POST   /wishlists/<wishlist_id>/wishes             { wish_name, wish_price, wish_link }
#     PUT    /wishlists/<wishlist_id>/wishes/<wish_id>   { wish_name, wish_price, wish_link }
#     DELETE /wishlists/<wishlist_id>/wishes/<wish_id>
# ═══════════════════════════════════════════════════════════════════
@api_bp.route('/wishlists/<wishlist_id>/wishes', methods=['GET'])
def list_wishes(wishlist_id):
    wid = parse_id(wishlist_id)
    if not wid:
        return _bad_request('wishlist_id', wid.reason)

    missing = _require_wishlist(_wishlists(), wid.value)
    if missing:
        return missing

    result = _wishes().get_all(wid.value)
    if result is NO_RESULT:
        return _server_error()
    return send_response(200, 'Fetched wishes.', result)


@api_bp.route('/wishlists/<wishlist_id>/wishes/<wish_id>', methods=['GET'])
def get_wish(wishlist_id, wish_id):
    wid = parse_id(wishlist_id)
    sid = parse_id(wish_id)
    invalid = _first_invalid([('wishlist_id', wid), ('wish_id', sid)])
    if invalid:
        return invalid

    wishes = _wishes()
    missing = _require_wishlist(_wishlists(), wid.value) or _require_wish(wishes, wid.value, sid.value)
    if missing:
        return missing

    result = wishes.get(wid.value, sid.value)
    if result is NO_RESULT:
        return _server_error()
    if result is None:
        return send_response(404, 'Wish not found.')
    return send_response(200, 'Fetched wish.', result)


@api_bp.route('/wishlists/<wishlist_id>/wishes', methods=['POST'])
def create_wish(wishlist_id):
    data = get_json_payload()
    wid = parse_id(wishlist_id)
    name, price, link = _wish_fields(data)

    invalid = _first_invalid([
        ('wishlist_id', wid),
        ('wish_name', name),
        ('wish_price', price),
        ('wish_link', link),
    ])
    if invalid:
        return invalid

    wishlists = _wishlists()
    missing = _require_wishlist(wishlists, wid.value)
    if missing:
        return missing

    result = _wishes().create(wid.value, name.value, price.value, link.value)
    if result is NO_RESULT:
        return _server_error()

    _touch_wishlist(wishlists, wid.value)
    return send_response(201, 'Created wish.', result)


@api_bp.route('/wishlists/<wishlist_id>/wishes/<wish_id>', methods=['PUT'])
def update_wish(wishlist_id, wish_id):
    data = get_json_payload()
    wid = parse_id(wishlist_id)
    sid = parse_id(wish_id)
    name, price, link = _wish_fields(data)

    invalid = _first_invalid([
        ('wishlist_id', wid),
        ('wish_id', sid),
        ('wish_name', name),
        ('wish_price', price),
        ('wish_link', link),
    ])
    if invalid:
        return invalid

    wishlists = _wishlists()
    wishes = _wishes()
    missing = _require_wishlist(wishlists, wid.value) or _require_wish(wishes, wid.value, sid.value)
    if missing:
        return missing

    result = wishes.update(wid.value, sid.value, name.value, price.value, link.value)
    if result is NO_RESULT:
        return _server_error()

    _touch_wishlist(wishlists, wid.value)
    return send_response(200, 'Updated wish.', result)


@api_bp.route('/wishlists/<wishlist_id>/wishes/<wish_id>', methods=['DELETE'])
def delete_wish(wishlist_id, wish_id):
    wid = parse_id(wishlist_id)
    sid = parse_id(wish_id)
    invalid = _first_invalid([('wishlist_id', wid), ('wish_id', sid)])
    if invalid:
        return invalid

    wishlists = _wishlists()
    wishes = _wishes()
    missing = _require_wishlist(wishlists, wid.value) or _require_wish(wishes, wid.value, sid.value)
    if missing:
        return missing

    result = wishes.delete(wid.value, sid.value)
    if result is NO_RESULT:
        return _server_error()

    _touch_wishlist(wishlists, wid.value)
    return send_response(200, 'Deleted wish.', result)
