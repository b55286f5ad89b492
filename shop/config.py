import logging
import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError, ValidationError
from .models import to_money

logger = logging.getLogger("shop.config")

ENV_CONFIG_FILE = "SHOP_CONFIG"

# field name -> environment variable
ENV_OVERRIDES = {
    "tax_rate": "SHOP_TAX_RATE",
    "free_shipping_threshold": "SHOP_FREE_SHIPPING_THRESHOLD",
    "shipping_cost": "SHOP_SHIPPING_COST",
}


def _rate(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigError(f"tax_rate must be a number, got {value!r}")
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ConfigError(f"tax_rate must be a number, got {value!r}") from None
    if not rate.is_finite() or rate < 0 or rate > 1:
        raise ConfigError(f"tax_rate must be between 0 and 1, got {value!r}")
    return rate


def _amount(name: str, value: Any) -> Decimal:
    try:
        amount = to_money(value)
    except ValidationError:
        raise ConfigError(f"{name} must be a monetary amount, got {value!r}") from None
    if amount < 0:
        raise ConfigError(f"{name} must not be negative, got {value!r}")
    return amount


@dataclass(frozen=True)
class PricingConfig:
    tax_rate: Decimal = Decimal("0.08")
    free_shipping_threshold: Decimal = Decimal("100.00")
    shipping_cost: Decimal = Decimal("10.00")

    def __post_init__(self):
        object.__setattr__(self, "tax_rate", _rate(self.tax_rate))
        object.__setattr__(self, "free_shipping_threshold",
                           _amount("free_shipping_threshold", self.free_shipping_threshold))
        object.__setattr__(self, "shipping_cost", _amount("shipping_cost", self.shipping_cost))

    def with_overrides(self, values: Mapping[str, Any]) -> "PricingConfig":
        unknown = set(values) - set(ENV_OVERRIDES)
        if unknown:
            raise ConfigError(f"unknown pricing keys: {', '.join(sorted(unknown))}")
        return replace(self, **dict(values))


DEFAULT_PRICING = PricingConfig()


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    section = data.get("pricing", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'pricing' must be a mapping")
    logger.info("loaded pricing config from %s", path)
    return section


def load_pricing_config(path: Optional[str] = None,
                        environ: Optional[Mapping[str, str]] = None) -> PricingConfig:
    """Defaults, then the YAML file (``path`` or $SHOP_CONFIG), then SHOP_* variables."""
    env = os.environ if environ is None else environ
    config = DEFAULT_PRICING

    path = path or env.get(ENV_CONFIG_FILE)
    if path:
        config = config.with_overrides(_read_yaml(path))

    overrides = {name: env[var] for name, var in ENV_OVERRIDES.items() if env.get(var)}
    if overrides:
        logger.debug("pricing overrides from environment: %s", overrides)
        config = config.with_overrides(overrides)
    return config
