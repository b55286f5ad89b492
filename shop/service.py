import json
import logging
from typing import Iterable, List, Tuple

from .config import DEFAULT_PRICING, PricingConfig
from .errors import EmptyCartError, InsufficientStockError
from .ids import Registry
from .models import Customer, Order, OrderDraft, Product, ShoppingCart
from .pricing import calculate_final_total, price_breakdown

logger = logging.getLogger("shop.service")


def add_items(cart: ShoppingCart, items: Iterable[Tuple[Product, int]]) -> ShoppingCart:
    for product, quantity in items:
        cart.add_product(product, quantity)
    return cart


def checkout(customer: Customer, registry: Registry, config: PricingConfig = DEFAULT_PRICING) -> Order:
    """Turn the customer's cart into a Pending order.

    Stock is checked for every line before any of it is taken, so a rejected
    checkout leaves products and cart untouched. On success the cart is cleared.
    """
    cart = customer.cart
    if cart.is_empty():
        logger.warning("checkout rejected for %s: cart is empty", customer.customer_id)
        raise EmptyCartError(f"cart of {customer.customer_id} is empty")

    lines = cart.items()
    shortages = [
        (line.product, line.quantity, line.product.stock_quantity)
        for line in lines
        if line.quantity > line.product.stock_quantity
    ]
    if shortages:
        logger.warning("checkout rejected for %s: %d line(s) short on stock",
                       customer.customer_id, len(shortages))
        raise InsufficientStockError(shortages)

    total = calculate_final_total(cart.total(), config)
    draft = OrderDraft(customer=customer, items=lines, total_amount=total)

    taken = []
    for line in lines:
        if not line.product.reduce_stock(line.quantity):
            for done in taken:
                done.product.restock(done.quantity)
            raise InsufficientStockError(
                [(line.product, line.quantity, line.product.stock_quantity)])
        taken.append(line)

    order = registry.build_order(draft)
    cart.clear()
    logger.info("order %s placed by %s: %d line(s), total=%s",
                order.order_id, customer.customer_id, len(order.items), order.total_amount)
    return order


def print_receipt(order: Order) -> str:
    payload = {
        "order_id": order.order_id,
        "customer": order.customer.customer_id,
        "total_amount": str(order.total_amount),
        "count": len(order.items),
        "status": order.status.value,
    }
    text = json.dumps(payload, ensure_ascii=False)
    print(text)
    return text


def render_cart(cart: ShoppingCart) -> str:
    lines: List[str] = [f"--- Shopping Cart for {cart.customer.name} ---"]
    if cart.is_empty():
        lines.append("Cart is empty")
        return "\n".join(lines)
    lines.extend(str(item) for item in cart.items())
    lines.append(f"Total: ${cart.total():.2f}")
    return "\n".join(lines)


def render_breakdown(subtotal, config: PricingConfig = DEFAULT_PRICING) -> str:
    b = price_breakdown(subtotal, config)
    shipping = "FREE" if not b.shipping else f"${b.shipping:.2f}"
    return "\n".join([
        "--- Price Breakdown ---",
        f"Subtotal:        ${b.subtotal:.2f}",
        f"Tax ({b.tax_rate * 100:.0f}%):      ${b.tax:.2f}",
        f"Shipping:        {shipping}",
        f"Total:           ${b.total:.2f}",
    ])


def render_order(order: Order) -> str:
    lines = [
        "========== ORDER DETAILS ==========",
        f"Order ID: {order.order_id}",
        f"Customer: {order.customer.name}",
        f"Status: {order.status.value}",
        "",
        "Items:",
    ]
    lines.extend(f"  {line}" for line in order.items)
    lines.append(f"Total: ${order.total_amount:.2f}")
    lines.append("==================================")
    return "\n".join(lines)
