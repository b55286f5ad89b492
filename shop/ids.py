import itertools
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .models import Address, Customer, Order, OrderDraft, Product


class IdSequence:
    """Monotonic, thread-safe identifier source: PROD1, PROD2, ..."""

    def __init__(self, prefix: str, start: int = 1):
        self.prefix = prefix
        self._start = start
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._last = start - 1

    def next_value(self) -> int:
        with self._lock:
            self._last = next(self._counter)
            return self._last

    def next_id(self) -> str:
        return f"{self.prefix}{self.next_value()}"

    @property
    def issued(self) -> int:
        return self._last - self._start + 1


@dataclass
class Registry:
    products: IdSequence = field(default_factory=lambda: IdSequence("PROD"))
    customers: IdSequence = field(default_factory=lambda: IdSequence("CUST"))
    orders: IdSequence = field(default_factory=lambda: IdSequence("ORD"))

    def new_product(self, name: str, price, category: str = "General", stock_quantity: int = 0) -> Product:
        return Product(self.products.next_id(), name, price, category, stock_quantity)

    def new_customer(self, name: str, email: str, address: Optional[Address] = None) -> Customer:
        return Customer(self.customers.next_id(), name, email, address)

    def build_order(self, draft: OrderDraft) -> Order:
        return Order(
            order_id=self.orders.next_id(),
            customer=draft.customer,
            items=draft.items,
            total_amount=draft.total_amount,
        )

    def stats(self) -> Dict[str, int]:
        return {
            "products": self.products.issued,
            "customers": self.customers.issued,
            "orders": self.orders.issued,
        }
