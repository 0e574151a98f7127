# tests/test_presenters.py
from datetime import date

from fastapi.testclient import TestClient

from adminsdk.client import AdminClient
from mockapi.main import app
from storeadmin.presenters import CategoryPresenter, OrderPresenter, ProductPresenter

client = TestClient(app)


class CountingSession:
    """Passes requests through to the test app and records them."""

    def __init__(self, inner):
        self.inner = inner
        self.headers = inner.headers
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url))
        return self.inner.request(method, url, **kwargs)


def reset():
    client.post("/reset")


def make_api(base_url="http://testserver"):
    session = CountingSession(client)
    return AdminClient(base_url=base_url, session=session), session


def yes(_question):
    return True


def no(_question):
    return False


def test_initial_state_is_loading_with_closed_dialog():
    api, _ = make_api()
    page = CategoryPresenter(api)
    assert page.loading is True
    assert page.dialog.open is False
    assert page.items == []


def test_mount_loads_and_clears_loading():
    reset()
    api, _ = make_api()
    api.create("/categories", {"name": "Tools"})
    page = CategoryPresenter(api)
    page.mount()
    assert page.loading is False
    assert [c.name for c in page.items] == ["Tools"]


def test_mount_failure_still_clears_loading():
    reset()
    api, _ = make_api("http://testserver/nowhere")
    page = OrderPresenter(api)
    page.mount()
    assert page.loading is False
    assert page.items == []
    assert page.notifications.current.severity == "error"


def test_add_new_resets_form_and_opens_create_dialog():
    reset()
    api, _ = make_api()
    page = ProductPresenter(api)
    page.form["name"] = "leftover"
    page.errors = {"name": "Name is required"}
    page.add_new()
    assert page.dialog.open and page.dialog.mode == "create"
    assert page.dialog.editing is None
    assert page.form == {"name": "", "description": "", "price": "", "category_ids": [], "image_url": ""}
    assert page.errors == {}


def test_edit_snapshots_record_into_form():
    reset()
    api, _ = make_api()
    cat = api.create("/categories", {"name": "Tools"})
    api.create("/products", {"name": "Saw", "description": "sharp", "price": "12.00",
                             "category_ids": [cat["_id"]]})
    page = ProductPresenter(api)
    page.mount()
    record = page.items[0]

    page.edit(record)

    assert page.dialog.open and page.dialog.mode == "edit"
    assert page.dialog.editing is record
    assert page.form["name"] == "Saw"
    assert page.form["image_url"] == ""
    page.form["category_ids"].append("other")
    assert record.category_ids == [cat["_id"]]


def test_product_form_missing_name_and_price_makes_no_request():
    reset()
    api, session = make_api()
    cat = api.create("/categories", {"name": "Tools"})
    page = ProductPresenter(api)
    page.mount()
    page.add_new()
    page.set_field("description", "A thing")
    page.set_field("category_ids", [cat["_id"]])
    session.calls.clear()

    assert page.submit() is False

    assert set(page.errors) == {"name", "price"}
    assert session.calls == []
    assert page.dialog.open is True


def test_set_field_clears_that_fields_error():
    api, _ = make_api()
    page = CategoryPresenter(api)
    page.add_new()
    page.submit()
    assert "name" in page.errors
    page.set_field("name", "Tools")
    assert "name" not in page.errors


def test_submit_create_closes_dialog_and_appends():
    reset()
    api, _ = make_api()
    page = CategoryPresenter(api)
    page.mount()
    page.add_new()
    page.set_field("name", "  Garden ")

    assert page.submit() is True

    assert page.dialog.open is False
    assert [c.name for c in page.items] == ["Garden"]
    assert page.notifications.current.message == "Category created successfully"


def test_submit_edit_updates_record():
    reset()
    api, _ = make_api()
    api.create("/categories", {"name": "Tools"})
    page = CategoryPresenter(api)
    page.mount()
    page.edit(page.items[0])
    page.set_field("name", "Hand tools")
    assert page.submit() is True
    assert [c.name for c in page.items] == ["Hand tools"]


def test_category_save_failure_keeps_dialog_open_with_generic_error():
    reset()
    api, _ = make_api("http://testserver/nowhere")
    page = CategoryPresenter(api)
    page.add_new()
    page.set_field("name", "Tools")

    assert page.submit() is False

    assert page.dialog.open is True
    assert page.errors == {"name": "Failed to save category"}
    assert page.notifications.current.message == "Failed to save category"


def test_close_dialog_discards_edits():
    reset()
    api, session = make_api()
    page = CategoryPresenter(api)
    page.mount()
    page.add_new()
    page.set_field("name", "Draft")
    session.calls.clear()
    page.close_dialog()
    assert page.dialog.open is False
    assert page.items == []
    assert session.calls == []


def test_delete_requires_confirmation():
    reset()
    api, session = make_api()
    api.create("/categories", {"name": "Tools"})
    page = CategoryPresenter(api)
    page.mount()
    session.calls.clear()
    asked = []

    def decline(question):
        asked.append(question)
        return False

    assert page.delete(page.items[0].id, decline) is False
    assert asked == ["Are you sure you want to delete this category?"]
    assert session.calls == []
    assert len(page.items) == 1

    assert page.delete(page.items[0].id, yes) is True
    assert page.items == []


def test_deleting_referenced_category_shows_unknown():
    reset()
    api, _ = make_api()
    tools = api.create("/categories", {"name": "Tools"})
    garden = api.create("/categories", {"name": "Garden"})
    api.create("/products", {"name": "Rake", "description": "d", "price": "9.99",
                             "category_ids": [tools["_id"], garden["_id"]]})

    categories = CategoryPresenter(api)
    categories.mount()
    assert categories.delete(tools["_id"], yes) is True

    products = ProductPresenter(api)
    products.mount()
    assert len(products.items) == 1
    assert products.category_names(products.items[0]) == ["Unknown", "Garden"]


def test_product_page_loads_when_categories_fail():
    reset()
    api, _ = make_api()
    api.create("/products", {"name": "Rake", "description": "d", "price": "9.99", "category_ids": ["c1"]})
    page = ProductPresenter(api)
    page.categories_controller.client = AdminClient(base_url="http://testserver/nowhere", session=client)

    page.mount()

    assert page.loading is False
    assert [p.name for p in page.items] == ["Rake"]
    assert page.category_names(page.items[0]) == ["Unknown"]
    assert page.notifications.current.message == "Failed to load categories"


def test_order_total_follows_selection():
    reset()
    api, _ = make_api()
    a = api.create("/products", {"name": "A", "description": "d", "price": "10.00", "category_ids": ["c"]})
    b = api.create("/products", {"name": "B", "description": "d", "price": "5.50", "category_ids": ["c"]})
    page = OrderPresenter(api)
    page.mount()
    page.add_new()

    assert page.form["date"] == date.today().isoformat()
    assert page.form["total"] == "0.00"

    page.set_field("product_ids", [a["_id"], b["_id"]])
    assert page.form["total"] == "15.50"

    page.set_field("product_ids", [a["_id"]])
    assert page.form["total"] == "10.00"

    page.set_field("total", "999.00")
    assert page.form["total"] == "10.00"


def test_order_submit_sends_computed_total():
    reset()
    api, _ = make_api()
    a = api.create("/products", {"name": "A", "description": "d", "price": "10.00", "category_ids": ["c"]})
    b = api.create("/products", {"name": "B", "description": "d", "price": "5.50", "category_ids": ["c"]})
    page = OrderPresenter(api)
    page.mount()
    page.add_new()
    page.set_field("product_ids", [a["_id"], b["_id"]])

    assert page.submit() is True

    order = page.items[0]
    assert order.total == "15.50"
    assert order.product_ids == [a["_id"], b["_id"]]
    assert page.product_names(order) == ["A", "B"]


def test_order_form_requires_date_and_products():
    api, session = make_api()
    page = OrderPresenter(api)
    page.add_new()
    page.set_field("date", "")
    session.calls.clear()
    assert page.submit() is False
    assert page.errors == {"date": "Date is required", "product_ids": "Please select at least one product"}
    assert session.calls == []


def test_order_names_for_missing_product_are_unknown():
    reset()
    api, _ = make_api()
    api.create("/orders", {"date": "2024-01-01", "product_ids": ["gone"], "total": "3.00"})
    page = OrderPresenter(api)
    page.mount()
    assert page.product_names(page.items[0]) == ["Unknown"]


def test_attach_image_uploads_and_sets_url(tmp_path):
    reset()
    api, _ = make_api()
    img = tmp_path / "saw.png"
    img.write_bytes(b"\x89PNG fake")
    page = ProductPresenter(api)
    page.add_new()

    assert page.attach_image(str(img)) is True
    assert page.form["image_url"].startswith("/uploads/")
    assert page.form["image_url"].endswith("saw.png")


def test_attach_image_failure_notifies(tmp_path):
    api, _ = make_api()
    page = ProductPresenter(api)
    page.add_new()
    assert page.attach_image(str(tmp_path / "missing.png")) is False
    assert page.form["image_url"] == ""
    assert page.notifications.current.message == "Failed to upload image"


def test_dismiss_notification():
    reset()
    api, _ = make_api("http://testserver/nowhere")
    page = CategoryPresenter(api)
    page.mount()
    assert page.notifications.current.open is True
    page.dismiss_notification()
    assert page.notifications.current.open is False
    assert page.notifications.current.message == "Failed to load categories"
