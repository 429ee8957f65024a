"""
Engine Registry - selects and holds the imaging back end
"""

import logging
from threading import Lock
from typing import Callable, List, Optional, Union

from core.engines import driver_available, is_known_driver, load_engine_class
from core.engines.base import ImageEngine
from core.exceptions import ConfigurationError
from core.utils.enum_converter import ensure_list

logger = logging.getLogger(__name__)


class EngineRegistry:
    """
    Lazily selects the imaging engine from an ordered list of drivers.

    The first driver whose libraries are installed wins. The engine is
    created once, on first use, and only replaced through set_engine.
    """

    def __init__(
        self,
        drivers: Optional[Union[str, List[str]]] = None,
        probe: Optional[Callable[[str], bool]] = None,
    ):
        """
        Initialize Engine Registry

        Args:
            drivers: Driver names in order of preference (defaults to settings)
            probe: Availability check per driver (defaults to an import lookup)
        """
        if drivers is None:
            from config import get_settings

            drivers = get_settings().engine.drivers

        self._drivers = ensure_list(drivers)
        self._probe = probe or driver_available
        self._engine: Optional[ImageEngine] = None
        self.lock = Lock()

    @property
    def drivers(self) -> List[str]:
        return list(self._drivers)

    @drivers.setter
    def drivers(self, drivers: Union[str, List[str]]) -> None:
        if self._engine is not None:
            logger.warning(
                f"Engine {self._engine.name} already selected, new driver list "
                f"{ensure_list(drivers)} only applies to a fresh registry"
            )
        self._drivers = ensure_list(drivers)

    def get_engine(self) -> ImageEngine:
        """
        Get the active engine, creating it on first call.

        Raises:
            ConfigurationError: If a driver is unknown or none is supported
        """
        if self._engine is None:
            with self.lock:
                if self._engine is None:
                    self._engine = self._create_engine()
        return self._engine

    def set_engine(self, engine: ImageEngine) -> None:
        """Replace the active engine unconditionally."""
        with self.lock:
            self._engine = engine
        logger.info(f"Imaging engine set to {engine!r}")

    def _create_engine(self) -> ImageEngine:
        for driver in self._drivers:
            if not is_known_driver(driver):
                raise ConfigurationError(f"Unknown driver: {driver}")

            if self._probe(driver):
                engine = load_engine_class(driver)()
                logger.info(f"Imaging engine selected: {driver}")
                return engine

            logger.debug(f"Driver {driver} is not available on this host")

        raise ConfigurationError(
            "Your system does not support any of these drivers: " + ",".join(self._drivers)
        )
