import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Callable, Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from adminsdk.client import AdminClient, ApiError

from .models import Category, Order, Product
from .notifications import NotificationChannel

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Resource(Generic[R]):
    path: str
    model: Type[R]
    singular: str
    plural: str


CATEGORIES = Resource("/categories", Category, "category", "categories")
PRODUCTS = Resource("/products", Product, "product", "products")
ORDERS = Resource("/orders", Order, "order", "orders")


@dataclass
class ResourceState(Generic[R]):
    """The client-side cache of one collection plus its loading flag."""
    notifications: NotificationChannel
    items: List[R] = field(default_factory=list)
    loading: bool = True


class ResourceController(Generic[R]):
    """Keeps a ResourceState in step with one remote collection.

    Every remote failure is caught here, logged and turned into an error
    notification; nothing raises past these methods. Mutations patch the
    cached list from the response instead of re-fetching it.
    """

    def __init__(self, client: AdminClient, resource: Resource[R]):
        self.client = client
        self.resource = resource

    @property
    def _label(self) -> str:
        return self.resource.singular.capitalize()

    def _parse(self, payload) -> R:
        return self.resource.model.model_validate(payload)

    def fetch_all(self, state: ResourceState[R]) -> List[R]:
        try:
            rows = self.client.list(self.resource.path)
            state.items = [self._parse(row) for row in rows]
        except (ApiError, ValidationError) as e:
            logger.error("load %s failed: %s", self.resource.plural, e)
            state.notifications.error(f"Failed to load {self.resource.plural}")
        finally:
            state.loading = False
        return state.items

    def save(self, state: ResourceState[R], data: BaseModel, editing: Optional[R] = None,
             close_dialog: Optional[Callable[[], None]] = None) -> bool:
        body = data.model_dump()
        try:
            if editing is not None:
                updated = self._parse(self.client.update(self.resource.path, editing.id, body))
                state.items = [updated if item.id == editing.id else item for item in state.items]
                state.notifications.success(f"{self._label} updated successfully")
            else:
                created = self._parse(self.client.create(self.resource.path, body))
                state.items = state.items + [created]
                state.notifications.success(f"{self._label} created successfully")
        except (ApiError, ValidationError) as e:
            logger.error("save %s failed: %s", self.resource.singular, e)
            state.notifications.error(f"Failed to save {self.resource.singular}")
            return False
        if close_dialog is not None:
            close_dialog()
        return True

    def delete(self, state: ResourceState[R], record_id: str) -> bool:
        try:
            self.client.delete(self.resource.path, record_id)
        except ApiError as e:
            logger.error("delete %s %s failed: %s", self.resource.singular, record_id, e)
            state.notifications.error(f"Failed to delete {self.resource.singular}")
            return False
        state.items = [item for item in state.items if item.id != record_id]
        state.notifications.success(f"{self._label} deleted successfully")
        return True


def _price(value) -> Optional[Decimal]:
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def compute_total(product_ids: Iterable[str], catalog: Iterable[Product]) -> str:
    """Sum the prices of the referenced products as a two-decimal string.

    Ids missing from the catalog, and prices that do not parse, count as 0.
    """
    prices = {p.id: p.price for p in catalog}
    amounts = []
    for pid in product_ids:
        if pid not in prices:
            continue
        amount = _price(prices[pid])
        if amount is None:
            logger.warning("product %s has an unusable price %r", pid, prices[pid])
            continue
        amounts.append(amount)
    if not amounts:
        return "0.00"
    top = max(a.adjusted() for a in amounts)
    bottom = min(min(a.as_tuple().exponent for a in amounts), -2)
    with localcontext() as ctx:
        # wide enough that the sum and the rounding to cents stay exact
        ctx.prec = max(28, top - bottom + len(str(len(amounts))) + 4)
        total = sum(amounts, Decimal("0"))
        return str(total.quantize(_CENTS, rounding=ROUND_HALF_UP))


class OrderController(ResourceController[Order]):
    def __init__(self, client: AdminClient):
        super().__init__(client, ORDERS)

    compute_total = staticmethod(compute_total)


def category_controller(client: AdminClient) -> ResourceController[Category]:
    return ResourceController(client, CATEGORIES)


def product_controller(client: AdminClient) -> ResourceController[Product]:
    return ResourceController(client, PRODUCTS)


def order_controller(client: AdminClient) -> OrderController:
    return OrderController(client)
