"""
Handle registries for sensors and effectors.

A host registers opaque objects under string names so that rules and
host code can look them up later. The registry never calls or
inspects what it stores.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from .errors import UnknownHandleError

logger = logging.getLogger(__name__)


class HandleRegistry:
    """String-keyed store of opaque external handles.

    Example:
        sensors = HandleRegistry("sensors")
        sensors.add("thermometer", probe)
        sensors.get("thermometer")  # probe
        sensors.get("missing")      # raises UnknownHandleError
    """

    def __init__(self, name: str):
        self.name = name
        self._handles: Dict[str, Any] = {}

    def add(self, name: str, handle: Any) -> None:
        """Register a handle, replacing any previous one under the name."""
        if name in self._handles:
            logger.debug(f"Replacing {self.name} handle '{name}'")
        self._handles[name] = handle

    def get(self, name: str) -> Any:
        """Return the handle registered under name.

        Raises:
            UnknownHandleError: If nothing is registered under name
        """
        try:
            return self._handles[name]
        except KeyError:
            raise UnknownHandleError(name, self.name) from None

    def find(self, name: str) -> Optional[Any]:
        """Return the handle or None."""
        return self._handles.get(name)

    def names(self) -> List[str]:
        return list(self._handles)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)
