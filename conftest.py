import logging

import pytest

from shop.config import PricingConfig
from shop.ids import Registry

# 激活自定义插件
pytest_plugins = [
    "common.plugins.example_plugin",
]


def pytest_addoption(parser):
    parser.addoption("--env", action="store", default="dev", help="运行环境")


@pytest.fixture(scope="session")
def env(pytestconfig):
    return pytestconfig.getoption("--env")


@pytest.fixture
def registry():
    # 每个用例独立的 id 计数器
    return Registry()


@pytest.fixture
def pricing():
    return PricingConfig(tax_rate="0.08", free_shipping_threshold="100.00", shipping_cost="10.00")


@pytest.fixture
def customer(registry):
    return registry.new_customer("Ada", "ada@example.com")


@pytest.fixture
def widget(registry):
    return registry.new_product("Widget", "10.00", stock_quantity=5)


@pytest.fixture(scope="function")
def set_tax_rate(monkeypatch):
    monkeypatch.setenv("SHOP_TAX_RATE", "0.10")
    yield
    monkeypatch.delenv("SHOP_TAX_RATE", raising=False)


@pytest.fixture(scope="function")
def clean_env(monkeypatch):
    for var in ("SHOP_CONFIG", "SHOP_TAX_RATE", "SHOP_FREE_SHIPPING_THRESHOLD", "SHOP_SHIPPING_COST"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(scope="function")
def log_capture(caplog):
    caplog.set_level(logging.INFO, logger="shop")
    return caplog


def pytest_generate_tests(metafunc):
    if "quantity" in metafunc.fixturenames:
        metafunc.parametrize("quantity", [1, 2, 7], ids=["single", "pair", "many"])
