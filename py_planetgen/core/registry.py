"""
Thread-safe planet registry.

Owned by whatever orchestrates planet creation and passed to the components
that need lookups; there is no process-wide instance.
"""

import threading
from typing import Callable, Dict, List, Optional

import structlog

from .planet_config import PlanetConfig
from .planet_model import PlanetModel, create_model

logger = structlog.get_logger()


class PlanetRegistry:
    """Maps planet names to models with insert-if-absent semantics."""

    def __init__(self, factory: Optional[Callable[[PlanetConfig], PlanetModel]] = None):
        """
        Initialize registry.

        Args:
            factory: Builds a model from a config, defaults to create_model
        """
        self._factory = factory or create_model
        self._models: Dict[str, PlanetModel] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[PlanetModel]:
        """Model registered under name, or None if absent."""
        with self._lock:
            return self._models.get(name)

    def register(self, model: PlanetModel) -> PlanetModel:
        """
        Insert a model unless its name is taken.

        Returns:
            The model now registered under the name (the existing one on conflict)
        """
        with self._lock:
            existing = self._models.get(model.name)
            if existing is not None:
                return existing
            self._models[model.name] = model
            return model

    def get_or_create(self, config: PlanetConfig) -> PlanetModel:
        """
        Return the model registered for config.name, creating it if absent.

        Models are derived outside the lock; when two threads race on the same
        name the first insert wins and both receive that model.
        """
        existing = self.get(config.name)
        if existing is not None:
            return existing

        model = self._factory(config)
        registered = self.register(model)
        if registered is model:
            logger.info("Registered planet", planet=config.name)
        return registered

    def remove(self, name: str) -> Optional[PlanetModel]:
        with self._lock:
            return self._models.pop(name, None)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._models)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._models

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)
