"""
Centralized access to the inventory engine configuration.

Values come from the POS_ENGINE dict in Django settings, falling back to the
defaults below. Business logic reads them through `engine_settings` instead of
poking at django.conf.settings directly.
"""

from decimal import Decimal
from typing import Optional, Any
import logging

from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.dispatch import receiver

logger = logging.getLogger(__name__)


DEFAULTS = {
    "MAX_CONVERSION_DEPTH": 10,
    "MAX_RECIPE_DEPTH": 10,
    "STOCK_DECIMAL_PLACES": 4,
    "TAX_RATE": "0.08",
    "CONVERSION_CACHE_TIMEOUT": 3600,
}


class EngineSettings:
    """
    A LAZY singleton holding the engine constants.
    Settings are read on first attribute access so importing this module
    never touches django.conf before it is configured.
    """

    _instance: Optional["EngineSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "EngineSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _setup(self):
        if not self._initialized:
            self.load_settings()
            self._initialized = True

    def __getattr__(self, name: str) -> Any:
        if not self._initialized:
            self._setup()

        try:
            return self.__dict__[name]
        except KeyError:
            raise AttributeError(f"'EngineSettings' object has no attribute '{name}'")

    def load_settings(self) -> None:
        from django.conf import settings

        configured = {**DEFAULTS, **getattr(settings, "POS_ENGINE", {})}

        try:
            self.max_conversion_depth: int = int(configured["MAX_CONVERSION_DEPTH"])
            self.max_recipe_depth: int = int(configured["MAX_RECIPE_DEPTH"])
            self.stock_decimal_places: int = int(configured["STOCK_DECIMAL_PLACES"])
            self.tax_rate: Decimal = Decimal(str(configured["TAX_RATE"]))
            self.conversion_cache_timeout: int = int(configured["CONVERSION_CACHE_TIMEOUT"])
        except (TypeError, ValueError, ArithmeticError) as e:
            raise ImproperlyConfigured(f"Invalid POS_ENGINE setting: {e}")

        if self.max_conversion_depth < 2:
            raise ImproperlyConfigured("POS_ENGINE['MAX_CONVERSION_DEPTH'] must be at least 2")
        if self.max_recipe_depth < 0:
            raise ImproperlyConfigured("POS_ENGINE['MAX_RECIPE_DEPTH'] cannot be negative")

    @property
    def stock_quantum(self) -> Decimal:
        """Smallest representable stock increment, e.g. Decimal('0.0001')."""
        return Decimal(1).scaleb(-self.stock_decimal_places)

    def reload(self) -> None:
        """Drop the loaded values so the next access re-reads Django settings."""
        for key in list(self.__dict__):
            del self.__dict__[key]
        self._initialized = False
        logger.debug("Engine settings reloaded")


engine_settings = EngineSettings()


@receiver(setting_changed)
def reload_engine_settings(sender, setting, **kwargs):
    if setting == "POS_ENGINE":
        engine_settings.reload()
