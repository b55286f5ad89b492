from typing import List, Tuple


class ShopError(Exception):
    pass


class ValidationError(ShopError, ValueError):
    """Invalid input to a constructor or mutator; nothing was changed."""


class ConfigError(ShopError):
    pass


class EmptyCartError(ShopError):
    pass


class InsufficientStockError(ShopError):
    def __init__(self, shortages: List[Tuple[object, int, int]]):
        self.shortages = shortages
        names = ", ".join(
            f"{p.name} (requested {want}, available {have})" for p, want, have in shortages
        )
        super().__init__(f"insufficient stock: {names}")


class InvalidTransitionError(ShopError):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"cannot move order from {current.value} to {target.value}")
