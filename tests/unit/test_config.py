from decimal import Decimal

import pytest

from shop.config import DEFAULT_PRICING, PricingConfig, load_pricing_config
from shop.errors import ConfigError


@pytest.mark.unit
def test_defaults(clean_env):
    cfg = load_pricing_config()
    assert cfg == DEFAULT_PRICING
    assert cfg.tax_rate == Decimal("0.08")
    assert cfg.free_shipping_threshold == Decimal("100.00")
    assert cfg.shipping_cost == Decimal("10.00")


@pytest.mark.unit
def test_env_override(clean_env, set_tax_rate):
    # monkeypatch：打补丁环境变量，影响税率
    assert load_pricing_config().tax_rate == Decimal("0.10")


@pytest.mark.unit
def test_explicit_environ_mapping():
    cfg = load_pricing_config(environ={"SHOP_SHIPPING_COST": "4.5", "SHOP_FREE_SHIPPING_THRESHOLD": "50"})
    assert cfg.shipping_cost == Decimal("4.50")
    assert cfg.free_shipping_threshold == Decimal("50.00")
    assert cfg.tax_rate == DEFAULT_PRICING.tax_rate


@pytest.mark.unit
def test_yaml_file_then_env(tmp_path, monkeypatch, clean_env):
    p = tmp_path / "shop.yaml"
    p.write_text("pricing:\n  tax_rate: 0.2\n  shipping_cost: 7\n", encoding="utf-8")
    monkeypatch.setenv("SHOP_CONFIG", str(p))
    cfg = load_pricing_config()
    assert cfg.tax_rate == Decimal("0.2")
    assert cfg.shipping_cost == Decimal("7.00")

    # 环境变量优先于配置文件
    monkeypatch.setenv("SHOP_SHIPPING_COST", "3")
    assert load_pricing_config().shipping_cost == Decimal("3.00")


@pytest.mark.unit
def test_yaml_top_level_keys(tmp_path):
    p = tmp_path / "flat.yaml"
    p.write_text("free_shipping_threshold: 25\n", encoding="utf-8")
    cfg = load_pricing_config(str(p), environ={})
    assert cfg.free_shipping_threshold == Decimal("25.00")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    ["pricing:\n  discount: 0.1\n", "- 1\n- 2\n", "pricing: [1, 2]\n", "tax_rate: [\n"],
    ids=["unknown-key", "not-mapping", "bad-section", "bad-yaml"],
)
def test_bad_yaml(tmp_path, text):
    p = tmp_path / "bad.yaml"
    p.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_pricing_config(str(p), environ={})


@pytest.mark.unit
def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_pricing_config(str(tmp_path / "nope.yaml"), environ={})


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [{"tax_rate": "1.5"}, {"tax_rate": "-0.01"}, {"tax_rate": "abc"}, {"shipping_cost": "-1"},
     {"free_shipping_threshold": "x"}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        PricingConfig(**kwargs)


@pytest.mark.unit
def test_invalid_env_value():
    with pytest.raises(ConfigError):
        load_pricing_config(environ={"SHOP_TAX_RATE": "lots"})
