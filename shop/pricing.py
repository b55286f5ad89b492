import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from .config import DEFAULT_PRICING, PricingConfig
from .errors import ValidationError
from .models import CENTS, CartItem, Money, OrderLine, to_money

logger = logging.getLogger("shop.pricing")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def _subtotal(value: Money) -> Decimal:
    amount = to_money(value)
    if amount < 0:
        raise ValidationError(f"subtotal must not be negative, got {value!r}")
    return amount


def _tax_rate(value: Optional[Money], config: PricingConfig) -> Decimal:
    if value is None:
        return config.tax_rate
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"tax rate must be a number, got {value!r}") from None
    if not rate.is_finite() or rate < 0 or rate > 1:
        raise ValidationError(f"tax rate must be between 0 and 1, got {value!r}")
    return rate


def calculate_subtotal(items: Iterable[Union[CartItem, OrderLine]]) -> Decimal:
    subtotal = sum((i.subtotal for i in items), Decimal("0.00"))
    logger.info("subtotal=%s", subtotal)
    return subtotal


def calculate_tax(subtotal: Money, tax_rate: Optional[Money] = None,
                  config: PricingConfig = DEFAULT_PRICING) -> Decimal:
    rate = _tax_rate(tax_rate, config)
    return (_subtotal(subtotal) * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_total(subtotal: Money, tax_rate: Optional[Money] = None,
                    config: PricingConfig = DEFAULT_PRICING) -> Decimal:
    amount = _subtotal(subtotal)
    return amount + calculate_tax(amount, tax_rate, config)


def calculate_shipping(subtotal: Money, config: PricingConfig = DEFAULT_PRICING) -> Decimal:
    if _subtotal(subtotal) >= config.free_shipping_threshold:
        return Decimal("0.00")
    return config.shipping_cost


def calculate_final_total(subtotal: Money, config: PricingConfig = DEFAULT_PRICING) -> Decimal:
    return price_breakdown(subtotal, config).total


def price_breakdown(subtotal: Money, config: PricingConfig = DEFAULT_PRICING) -> PriceBreakdown:
    amount = _subtotal(subtotal)
    tax = calculate_tax(amount, config=config)
    # shipping is not taxed
    shipping = calculate_shipping(amount, config)
    total = amount + tax + shipping
    logger.debug("total computed: %s (tax=%s shipping=%s)", total, tax, shipping)
    return PriceBreakdown(
        subtotal=amount,
        tax_rate=config.tax_rate,
        tax=tax,
        shipping=shipping,
        total=total,
    )
