from __future__ import annotations


class PricingError(Exception):
    """Base class for every error raised by the pricing calculator."""


class DataLoadError(PricingError):
    """The catalog JSON could not be read or parsed."""


class RateLoadWarning(PricingError, Warning):
    """The optional rate CSV could not be used; embedded rates apply."""


class ValidationError(PricingError):
    """User input is incomplete or the quantity is not a positive number."""


class RateNotFoundError(PricingError):
    def __init__(self, key: tuple[str, str, str, str, str]):
        self.key = key
        super().__init__("No rate found for the selected combination.")
