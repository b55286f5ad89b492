import json

import pytest

from common.factories import make_customer, make_lines, make_products
from shop.config import load_pricing_config
from shop.demo import run_demo
from shop.service import add_items, checkout, print_receipt, render_breakdown, render_cart, render_order


@pytest.mark.e2e
def test_full_checkout_and_receipt(registry, capsys, clean_env, set_tax_rate):
    # e2e：端到端，串联多个组件；税率来自环境变量
    c = make_customer(registry, name="Grace", email="grace@example.com")
    add_items(c.cart, make_lines(make_products(registry, 2), quantity=1))
    order = checkout(c, registry, load_pricing_config())
    text = print_receipt(order)

    # capsys：捕获标准输出
    out = capsys.readouterr().out.strip()
    assert out == text

    payload = json.loads(text)
    # 21 + 2.10 税 + 10 运费
    assert payload == {
        "order_id": "ORD1",
        "customer": "CUST1",
        "total_amount": "33.10",
        "count": 2,
        "status": "Pending",
    }


@pytest.mark.e2e
def test_rendered_views(registry, pricing):
    c = make_customer(registry, name="Ada")
    assert render_cart(c.cart).splitlines()[-1] == "Cart is empty"

    p = registry.new_product("Widget", "10.00", stock_quantity=5)
    c.cart.add_product(p, 5)
    assert render_cart(c.cart).splitlines() == [
        "--- Shopping Cart for Ada ---",
        "Widget x 5 = $50.00",
        "Total: $50.00",
    ]
    assert render_breakdown(c.cart.total(), pricing).splitlines() == [
        "--- Price Breakdown ---",
        "Subtotal:        $50.00",
        "Tax (8%):      $4.00",
        "Shipping:        $10.00",
        "Total:           $64.00",
    ]
    assert "Shipping:        FREE" in render_breakdown("150", pricing)

    order = checkout(c, registry, pricing)
    view = render_order(order)
    assert "Order ID: ORD1" in view
    assert "  Widget x 5 = $50.00" in view
    assert "Total: $64.00" in view


@pytest.mark.e2e
def test_demo_runs(clean_env):
    text = run_demo()
    assert "PROD1: Laptop - $999.99 [Stock: 10]" in text
    assert "Wireless Mouse x 3 = $89.97" in text
    assert "Status: Pending" in text
    assert "Products: 4" in text
    assert "Orders: 1" in text
