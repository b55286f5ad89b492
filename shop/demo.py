"""Walk through a complete shopping session and return what happened as text."""
import logging
from typing import List, Optional

from .config import PricingConfig, load_pricing_config
from .ids import Registry
from .models import Address
from .service import checkout, render_breakdown, render_cart, render_order


def run_demo(config: Optional[PricingConfig] = None) -> str:
    config = config or load_pricing_config()
    registry = Registry()
    out: List[str] = []

    laptop = registry.new_product("Laptop", "999.99", "Electronics", 10)
    mouse = registry.new_product("Wireless Mouse", "29.99")
    mouse.set_category("Electronics")
    mouse.set_stock_quantity(50)
    keyboard = registry.new_product("Mechanical Keyboard", "79.99")
    keyboard.set_category("Electronics")
    keyboard.set_stock_quantity(30)
    book = registry.new_product("Python Programming", "49.99", "Books", 100)
    out.append("--- Products ---")
    out.extend(str(p) for p in (laptop, mouse, keyboard, book))

    john = registry.new_customer("John Doe", "john@example.com",
                                 Address("123 Main St", "New York", "NY", "10001"))
    jane = registry.new_customer("Jane Smith", "jane@example.com")
    jane.address = Address("456 Oak Ave", "Los Angeles", "CA", "90001")
    out.append("")
    out.append("--- Customers ---")
    for c in (john, jane):
        out.append(str(c))
        out.append(f"Address: {c.address}")

    cart = john.cart
    cart.add_product(laptop)
    cart.add_product(mouse, 2)
    cart.add_product(keyboard)
    cart.add_product(mouse)
    out.append("")
    out.append(render_cart(cart))
    out.append(render_breakdown(cart.total(), config))

    order = checkout(john, registry, config)
    out.append("")
    out.append(render_order(order))
    out.append(render_cart(cart))

    jane.cart.add_product(book, 2)
    jane.cart.add_product(mouse)
    out.append("")
    out.append(render_cart(jane.cart))
    out.append(render_breakdown(jane.cart.total(), config))

    stats = registry.stats()
    out.append("")
    out.append("=== STATISTICS ===")
    out.append(f"Products: {stats['products']}")
    out.append(f"Customers: {stats['customers']}")
    out.append(f"Orders: {stats['orders']}")
    out.append(f"Tax Rate: {config.tax_rate * 100:.0f}%")
    out.append(f"Free Shipping Threshold: ${config.free_shipping_threshold:.2f}")
    return "\n".join(out)


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print(run_demo())


if __name__ == "__main__":
    main()
