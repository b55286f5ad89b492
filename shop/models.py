import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .errors import InvalidTransitionError, ValidationError

logger = logging.getLogger("shop.cart")
order_logger = logging.getLogger("shop.order")

CENTS = Decimal("0.01")

Money = Union[Decimal, float, int, str]


def to_money(value: Money) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"not a monetary amount: {value!r}")
    try:
        amount = Decimal(str(value))
        if amount.is_finite():
            return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        pass
    # unparsable, non-finite, or too many digits to hold cents
    raise ValidationError(f"not a monetary amount: {value!r}")


def _positive_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{what} must be a positive integer, got {value!r}")
    return value


def _non_negative_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def _non_blank(value, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} must be a non-empty string")
    return value


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip_code: str

    def __str__(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"


class Product:
    """A catalog entry. Identity is the product id; everything else may change."""

    def __init__(self, product_id: str, name: str, price: Money,
                 category: str = "General", stock_quantity: int = 0):
        self._product_id = _non_blank(product_id, "product id")
        self._name = _non_blank(name, "name")
        self._price = self._checked_price(price)
        self._category = _non_blank(category, "category")
        self._stock = _non_negative_int(stock_quantity, "stock quantity")

    @staticmethod
    def _checked_price(price: Money) -> Decimal:
        amount = to_money(price)
        if amount < 0:
            raise ValidationError(f"price must not be negative, got {price!r}")
        return amount

    @property
    def product_id(self) -> str:
        return self._product_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def price(self) -> Decimal:
        return self._price

    @property
    def category(self) -> str:
        return self._category

    @property
    def stock_quantity(self) -> int:
        return self._stock

    def set_price(self, price: Money) -> None:
        self._price = self._checked_price(price)

    def set_category(self, category: str) -> None:
        self._category = _non_blank(category, "category")

    def set_stock_quantity(self, quantity: int) -> None:
        self._stock = _non_negative_int(quantity, "stock quantity")

    def is_in_stock(self) -> bool:
        return self._stock > 0

    def reduce_stock(self, quantity: int) -> bool:
        """Take ``quantity`` units out of stock.

        Returns False and leaves stock untouched when not enough is available.
        """
        _positive_int(quantity, "quantity")
        if quantity > self._stock:
            return False
        self._stock -= quantity
        return True

    def restock(self, quantity: int) -> None:
        self._stock += _positive_int(quantity, "quantity")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self._product_id == other._product_id

    def __hash__(self) -> int:
        return hash(self._product_id)

    def __repr__(self) -> str:
        return f"Product({self._product_id!r}, {self._name!r}, price={self._price}, stock={self._stock})"

    def __str__(self) -> str:
        return f"{self._product_id}: {self._name} - ${self._price:.2f} [Stock: {self._stock}]"


@dataclass(eq=False)
class CartItem:
    product: Product
    quantity: int = 1

    def __post_init__(self):
        if not isinstance(self.product, Product):
            raise ValidationError(f"not a product: {self.product!r}")
        _positive_int(self.quantity, "quantity")

    @property
    def subtotal(self) -> Decimal:
        # live price, never cached
        return self.product.price * self.quantity

    def increase_quantity(self, amount: int) -> None:
        self.quantity += _positive_int(amount, "amount")

    def __str__(self) -> str:
        return f"{self.product.name} x {self.quantity} = ${self.subtotal:.2f}"


class ShoppingCart:
    def __init__(self, customer: "Customer"):
        self._customer = customer
        self._items: List[CartItem] = []

    @property
    def customer(self) -> "Customer":
        return self._customer

    def _line_for(self, product: Product) -> Optional[CartItem]:
        for item in self._items:
            if item.product == product:
                return item
        return None

    def add_product(self, product: Product, quantity: int = 1) -> None:
        if not isinstance(product, Product):
            raise ValidationError(f"not a product: {product!r}")
        _positive_int(quantity, "quantity")
        line = self._line_for(product)
        if line is not None:
            line.increase_quantity(quantity)
            logger.info("cart %s: %s quantity -> %s", self._customer.customer_id, product.product_id, line.quantity)
            return
        self._items.append(CartItem(product, quantity))
        logger.info("cart %s: added %s x %s", self._customer.customer_id, product.product_id, quantity)

    def remove_product(self, product: Product) -> None:
        before = len(self._items)
        self._items = [i for i in self._items if i.product != product]
        if len(self._items) != before:
            logger.info("cart %s: removed %s", self._customer.customer_id, product.product_id)

    def clear(self) -> None:
        self._items.clear()
        logger.info("cart %s: cleared", self._customer.customer_id)

    def is_empty(self) -> bool:
        return not self._items

    def item_count(self) -> int:
        return len(self._items)

    def total(self) -> Decimal:
        return sum((i.subtotal for i in self._items), Decimal("0.00"))

    def items(self) -> List[CartItem]:
        return [CartItem(i.product, i.quantity) for i in self._items]


class Customer:
    def __init__(self, customer_id: str, name: str, email: str, address: Optional[Address] = None):
        self._customer_id = _non_blank(customer_id, "customer id")
        self.name = name
        self.email = email
        self.address = address
        self._cart = ShoppingCart(self)

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _non_blank(value, "name")

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        if not isinstance(value, str) or "@" not in value.strip(" @"):
            raise ValidationError(f"invalid email: {value!r}")
        self._email = value

    @property
    def cart(self) -> ShoppingCart:
        return self._cart

    def __repr__(self) -> str:
        return f"Customer({self._customer_id!r}, {self.name!r})"

    def __str__(self) -> str:
        return f"{self._customer_id}: {self.name} ({self.email})"


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: Union["OrderStatus", str]) -> "OrderStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for status in cls:
                if status.value.lower() == wanted:
                    return status
        raise ValidationError(f"unknown order status: {value!r}")

    def can_transition_to(self, other: "OrderStatus") -> bool:
        return other in _TRANSITIONS[self]


_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "OrderLine":
        return cls(item.product.product_id, item.product.name, item.product.price, item.quantity)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def __str__(self) -> str:
        return f"{self.name} x {self.quantity} = ${self.subtotal:.2f}"


@dataclass
class OrderDraft:
    customer: Customer
    items: List[Union[CartItem, OrderLine]] = field(default_factory=list)
    total_amount: Money = 0


def _snapshot(items: Iterable[Union[CartItem, OrderLine]]) -> Tuple[OrderLine, ...]:
    lines = []
    for item in items:
        if isinstance(item, OrderLine):
            lines.append(item)
        elif isinstance(item, CartItem):
            lines.append(OrderLine.from_cart_item(item))
        else:
            raise ValidationError(f"not an order item: {item!r}")
    return tuple(lines)


class Order:
    """A placed order. Lines and total are frozen at build time; only status moves."""

    def __init__(self, order_id: str, customer: Customer,
                 items: Iterable[Union[CartItem, OrderLine]] = (), total_amount: Money = 0):
        self._order_id = order_id
        self._customer = customer
        self._items = _snapshot(items)
        self._total = to_money(total_amount)
        self._status = OrderStatus.PENDING
        self._created_at = datetime.now(timezone.utc)

    @property
    def order_id(self) -> str:
        return self._order_id

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def items(self) -> Tuple[OrderLine, ...]:
        return self._items

    @property
    def total_amount(self) -> Decimal:
        return self._total

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def set_status(self, value: Union[OrderStatus, str]) -> None:
        target = OrderStatus.parse(value)
        if not self._status.can_transition_to(target):
            raise InvalidTransitionError(self._status, target)
        order_logger.info("order %s: %s -> %s", self._order_id, self._status.value, target.value)
        self._status = target

    def to_dict(self) -> Dict[str, object]:
        return {
            "order_id": self._order_id,
            "customer": {"id": self._customer.customer_id, "name": self._customer.name},
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "unit_price": str(line.unit_price),
                    "quantity": line.quantity,
                }
                for line in self._items
            ],
            "total_amount": str(self._total),
            "status": self._status.value,
        }

    def __repr__(self) -> str:
        return f"Order({self._order_id!r}, status={self._status.value!r}, total={self._total})"
