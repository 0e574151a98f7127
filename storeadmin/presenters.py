import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel

from adminsdk.client import AdminClient, ApiError

from .controllers import (
    ResourceController, ResourceState, category_controller, compute_total,
    order_controller, product_controller,
)
from .models import Category, CategoryIn, Order, OrderIn, Product, ProductIn
from .notifications import NotificationChannel
from .validation import (
    FormErrors, validate_category_form, validate_order_form, validate_product_form,
)

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

DialogMode = Literal["create", "edit"]
Confirm = Callable[[str], bool]


@dataclass
class DialogState:
    open: bool = False
    mode: DialogMode = "create"
    editing: Optional[BaseModel] = None


class PagePresenter:
    """UI state for one resource page.

    Subclasses supply the controller, the form defaults, how a record is
    copied into the form, validation, and how the form becomes a request body.
    """

    title = ""
    singular = ""

    def __init__(self, controller: ResourceController, notifications: Optional[NotificationChannel] = None):
        self.controller = controller
        self.notifications = notifications or NotificationChannel()
        self.state = ResourceState(self.notifications)
        self.dialog = DialogState()
        self.form: Dict[str, Any] = self.form_defaults()
        self.errors: FormErrors = {}

    # Hooks
    def form_defaults(self) -> Dict[str, Any]:
        raise NotImplementedError

    def form_from(self, record) -> Dict[str, Any]:
        raise NotImplementedError

    def validate(self) -> FormErrors:
        raise NotImplementedError

    def build_input(self) -> BaseModel:
        raise NotImplementedError

    def fetch_related(self) -> None:
        pass

    # State
    @property
    def items(self) -> list:
        return self.state.items

    @property
    def loading(self) -> bool:
        return self.state.loading

    def mount(self) -> None:
        self.state.loading = True
        try:
            self.fetch_related()
            self.controller.fetch_all(self.state)
        finally:
            self.state.loading = False

    # Actions
    def add_new(self) -> None:
        self.form = self.form_defaults()
        self.errors = {}
        self.dialog = DialogState(open=True, mode="create")

    def edit(self, record) -> None:
        self.form = self.form_from(record)
        self.errors = {}
        self.dialog = DialogState(open=True, mode="edit", editing=record)

    def close_dialog(self) -> None:
        self.dialog = DialogState()

    def set_field(self, name: str, value: Any) -> None:
        self.form[name] = value
        self.errors.pop(name, None)

    def submit(self) -> bool:
        self.errors = self.validate()
        if self.errors:
            return False
        ok = self.controller.save(
            self.state, self.build_input(), self.dialog.editing, close_dialog=self.close_dialog,
        )
        if not ok:
            self.on_save_failed()
        return ok

    def on_save_failed(self) -> None:
        pass

    def delete(self, record_id: str, confirm: Confirm) -> bool:
        if not confirm(f"Are you sure you want to delete this {self.singular}?"):
            return False
        return self.controller.delete(self.state, record_id)

    def dismiss_notification(self) -> None:
        self.notifications.dismiss()

    def find(self, record_id: str):
        for item in self.state.items:
            if item.id == record_id:
                return item
        return None


class CategoryPresenter(PagePresenter):
    title = "Categories"
    singular = "category"

    def __init__(self, client: AdminClient, notifications: Optional[NotificationChannel] = None):
        super().__init__(category_controller(client), notifications)

    def form_defaults(self) -> Dict[str, Any]:
        return {"name": ""}

    def form_from(self, record: Category) -> Dict[str, Any]:
        return {"name": record.name}

    def validate(self) -> FormErrors:
        return validate_category_form(self.form)

    def build_input(self) -> CategoryIn:
        return CategoryIn(name=self.form["name"].strip())

    def on_save_failed(self) -> None:
        self.errors = {"name": "Failed to save category"}


class ProductPresenter(PagePresenter):
    title = "Products"
    singular = "product"

    def __init__(self, client: AdminClient, notifications: Optional[NotificationChannel] = None):
        super().__init__(product_controller(client), notifications)
        self.client = client
        self.categories_state = ResourceState(self.notifications)
        self.categories_controller = category_controller(client)

    @property
    def categories(self) -> List[Category]:
        return self.categories_state.items

    def fetch_related(self) -> None:
        self.categories_controller.fetch_all(self.categories_state)

    def form_defaults(self) -> Dict[str, Any]:
        return {"name": "", "description": "", "price": "", "category_ids": [], "image_url": ""}

    def form_from(self, record: Product) -> Dict[str, Any]:
        return {
            "name": record.name,
            "description": record.description,
            "price": record.price,
            "category_ids": list(record.category_ids),
            "image_url": record.image_url or "",
        }

    def validate(self) -> FormErrors:
        return validate_product_form(self.form)

    def build_input(self) -> ProductIn:
        return ProductIn(
            name=self.form["name"].strip(),
            description=self.form["description"].strip(),
            price=str(self.form["price"]).strip(),
            category_ids=list(self.form["category_ids"]),
            image_url=(self.form.get("image_url") or "").strip() or None,
        )

    def category_names(self, product: Product) -> List[str]:
        by_id = {c.id: c.name for c in self.categories}
        return [by_id.get(cid, UNKNOWN) for cid in product.category_ids]

    def attach_image(self, file_path: str) -> bool:
        try:
            url = self.client.upload_image(file_path)
        except ApiError as e:
            logger.error("image upload failed: %s", e)
            self.notifications.error("Failed to upload image")
            return False
        self.set_field("image_url", url)
        return True


class OrderPresenter(PagePresenter):
    title = "Orders"
    singular = "order"

    def __init__(self, client: AdminClient, notifications: Optional[NotificationChannel] = None):
        super().__init__(order_controller(client), notifications)
        self.products_state = ResourceState(self.notifications)
        self.products_controller = product_controller(client)

    @property
    def products(self) -> List[Product]:
        return self.products_state.items

    def fetch_related(self) -> None:
        # product names and prices are needed before orders can be shown
        self.products_controller.fetch_all(self.products_state)

    def form_defaults(self) -> Dict[str, Any]:
        return {"date": date.today().isoformat(), "product_ids": [], "total": "0.00"}

    def form_from(self, record: Order) -> Dict[str, Any]:
        return {"date": record.date, "product_ids": list(record.product_ids), "total": record.total}

    def set_field(self, name: str, value: Any) -> None:
        if name == "total":
            return
        super().set_field(name, value)
        if name == "product_ids":
            self.form["total"] = compute_total(value, self.products)

    def validate(self) -> FormErrors:
        return validate_order_form(self.form)

    def build_input(self) -> OrderIn:
        product_ids = list(self.form["product_ids"])
        return OrderIn(
            date=self.form["date"].strip(),
            product_ids=product_ids,
            total=compute_total(product_ids, self.products),
        )

    def product_names(self, order: Order) -> List[str]:
        by_id = {p.id: p.name for p in self.products}
        return [by_id.get(pid, UNKNOWN) for pid in order.product_ids]
