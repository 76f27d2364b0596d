import logging
import uuid
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.services.cart_storage import CartStorage
from app.services.pricing import compute_rental_days, compute_rental_total

logger = logging.getLogger(__name__)


class CartLineItem(BaseModel):
    """One rental selection in a cart.

    Product, vendor and price fields are copied from the product when the line
    is added and are never re-synced. ``rental_days``, ``subtotal`` and
    ``deposit_total`` are derived; only :class:`CartStore` writes them.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    product_id: str
    product_name: str
    product_image: str = ""
    category: Optional[str] = None
    vendor_id: str
    vendor_shop_name: Optional[str] = None
    price_per_day: float
    security_deposit: float = 0.0
    size: Optional[str] = None
    quantity: int = 1
    rental_start_date: Optional[str] = None
    rental_end_date: Optional[str] = None
    rental_days: int = 0
    subtotal: float = 0.0
    deposit_total: float = 0.0

    def recompute(self) -> "CartLineItem":
        self.rental_days = compute_rental_days(self.rental_start_date, self.rental_end_date)
        totals = compute_rental_total(self.price_per_day, self.rental_days, self.quantity, self.security_deposit)
        self.subtotal = totals["rental_fee"]
        self.deposit_total = totals["deposit"]
        return self

    @property
    def checkout_ready(self) -> bool:
        return self.rental_days > 0 and self.quantity >= 1

    def snapshot(self) -> dict:
        """Order snapshot shape: the line without its cart id."""
        return self.model_dump(exclude={"id"})


def _first_image(product) -> str:
    images = getattr(product, "images", None) or []
    return images[0] if images else ""


class CartStore:
    """Cart of the currently logged-in user, persisted through ``storage``.

    ``login`` loads the user's saved cart and ``logout`` forgets it, so a
    store reused for another identity never exposes the previous user's lines.
    Every mutation is written back to storage immediately.
    """

    def __init__(self, storage: CartStorage):
        self._storage = storage
        self._user_id: Optional[str] = None
        self._items: List[CartLineItem] = []

    # ------------------------------------------------------------------ identity

    def login(self, user_id: str) -> "CartStore":
        self._user_id = user_id
        self._items = self._load(user_id)
        return self

    def logout(self) -> None:
        self._user_id = None
        self._items = []

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    def _load(self, user_id: str) -> List[CartLineItem]:
        try:
            raw = self._storage.load(user_id)
            if not raw:
                return []
            return [CartLineItem.model_validate(entry) for entry in raw]
        except ValueError as exc:
            logger.warning("Discarding unreadable cart for user %s: %s", user_id, exc)
            self._storage.delete(user_id)
            return []

    def _save(self) -> None:
        if self._user_id is None:
            return
        self._storage.save(self._user_id, [item.model_dump() for item in self._items])

    def _find(self, line_id: str) -> Optional[CartLineItem]:
        return next((item for item in self._items if item.id == line_id), None)

    # ----------------------------------------------------------------- mutation

    def add_item(self, product, rental_start_date, rental_end_date, size, quantity: int = 1) -> CartLineItem:
        line = CartLineItem(
            product_id=str(product.id),
            product_name=product.name,
            product_image=_first_image(product),
            category=getattr(product, "category", None),
            vendor_id=str(product.sub_admin_id),
            vendor_shop_name=getattr(product, "shop_name", None),
            price_per_day=product.price_per_day,
            security_deposit=product.security_deposit or 0.0,
            size=size,
            quantity=quantity,
            rental_start_date=rental_start_date,
            rental_end_date=rental_end_date,
        ).recompute()
        self._items.append(line)
        self._save()
        return line

    def remove_item(self, line_id: str) -> bool:
        remaining = [item for item in self._items if item.id != line_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._save()
        return True

    def update_quantity(self, line_id: str, quantity: int) -> Optional[CartLineItem]:
        if quantity is None or quantity < 1:
            return None
        line = self._find(line_id)
        if line is None:
            return None
        line.quantity = quantity
        line.recompute()
        self._save()
        return line

    def update_dates(self, line_id: str, rental_start_date, rental_end_date) -> Optional[CartLineItem]:
        line = self._find(line_id)
        if line is None:
            return None
        line.rental_start_date = rental_start_date
        line.rental_end_date = rental_end_date
        line.recompute()
        self._save()
        return line

    def update_size(self, line_id: str, size: str) -> Optional[CartLineItem]:
        line = self._find(line_id)
        if line is None:
            return None
        line.size = size
        self._save()
        return line

    def clear(self) -> None:
        self._items = []
        self._save()

    # --------------------------------------------------------------- projection

    @property
    def items(self) -> List[CartLineItem]:
        return [item.model_copy() for item in self._items]

    def get(self, line_id: str) -> Optional[CartLineItem]:
        line = self._find(line_id)
        return line.model_copy() if line else None

    def group_by_vendor(self) -> Dict[str, dict]:
        groups: Dict[str, dict] = {}
        for item in self._items:
            group = groups.setdefault(item.vendor_id, {"shop_name": item.vendor_shop_name, "items": []})
            group["items"].append(item.model_copy())
        return groups

    def checkout_problems(self) -> List[str]:
        return [item.id for item in self._items if not item.checkout_ready]

    @property
    def cart_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_rental_fees(self) -> float:
        return sum(item.subtotal for item in self._items)

    @property
    def total_deposits(self) -> float:
        return sum(item.deposit_total for item in self._items)

    @property
    def grand_total(self) -> float:
        return self.total_rental_fees + self.total_deposits

    @property
    def unique_vendor_count(self) -> int:
        return len({item.vendor_id for item in self._items})

    def summary(self) -> dict:
        return {
            "items": [item.model_dump() for item in self._items],
            "cart_count": self.cart_count,
            "total_rental_fees": self.total_rental_fees,
            "total_deposits": self.total_deposits,
            "grand_total": self.grand_total,
            "unique_vendor_count": self.unique_vendor_count,
        }


__all__ = ["CartLineItem", "CartStore"]
