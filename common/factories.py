from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from shop.ids import Registry
from shop.models import Address, Customer, Money, Product


@dataclass(frozen=True)
class Defaults:
    base_price: Decimal = Decimal("10.00")
    stock: int = 100


def make_customer(registry: Registry, name: str = "Ada", email: str = "ada@example.com",
                  with_address: bool = False) -> Customer:
    address = Address("1 Test St", "Springfield", "IL", "62701") if with_address else None
    return registry.new_customer(name, email, address)


def make_products(registry: Registry, n: int = 1, base: Money = Defaults.base_price,
                  stock: int = Defaults.stock) -> List[Product]:
    return [registry.new_product(f"Item-{i}", Decimal(str(base)) + i, stock_quantity=stock) for i in range(n)]


def make_lines(products: List[Product], quantity: int = 1) -> List[Tuple[Product, int]]:
    return [(p, quantity) for p in products]
