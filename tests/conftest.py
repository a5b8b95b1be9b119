import pytest
from flask import Flask

from crud_ui import crud_ui


@pytest.fixture
def records():
    return {"1": {"id": 1, "name": "Axe", "kind": "tool", "sharp": True}}


@pytest.fixture
def make_app():
    """Build a host app with one CRUD UI mount. Returns (app, blueprint)."""

    def factory(url_prefix=None, **options):
        app = Flask(__name__)
        app.config["TESTING"] = True
        bp = crud_ui(options)
        app.register_blueprint(bp, url_prefix=url_prefix)
        return app, bp

    return factory


@pytest.fixture
def item_options(records):
    def get_list(ctx):
        return list(records.values())

    def get_single(ctx, id=None):
        return records.get(str(id))

    def create(ctx, payload):
        record = {"id": len(records) + 1, **payload}
        records[str(record["id"])] = record
        return record

    def update(ctx, id, payload):
        records[str(id)].update(payload)
        return records[str(id)]

    def delete(ctx, id):
        records.pop(str(id), None)
        return True

    return {
        "name": "item",
        "fields": [
            {"name": "name", "label": "Name", "validate": {"presence": True}},
            {"name": "kind", "type": "select", "values": ["tool", "weapon"], "null_option": True},
            {"name": "sharp", "type": "boolean"},
        ],
        "actions": {
            "get_list": get_list,
            "get_single": get_single,
            "create": create,
            "update": update,
            "delete": delete,
        },
    }


def fetch_csrf_token(client, path="/", cookie_name="CUI_csrf"):
    client.get(path)
    cookie = client.get_cookie(cookie_name)
    return cookie.value if cookie else None
