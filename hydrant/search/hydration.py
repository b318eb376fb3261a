"""
Hydration batcher: RawReference -> loaded entity, one batched fetch per class.

A Hydrator belongs to exactly one ResultSet. References the result set may
ever need (raw results, referencing facet rows) are registered up front
without loading anything; the first hydration request for a class loads
every registered key of that class in a single `load_all` call, and all
later requests for that class are served from the cache.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..errors import MissingEntityError
from .interfaces import EntityLoader
from .results import RawReference

log = logging.getLogger("search.hydration")


class Hydrator:
    def __init__(self, loader: Optional[EntityLoader], *, strict: bool = False) -> None:
        self.loader = loader
        self.strict = strict
        # class_name -> ordered set of primary keys (dict keys keep insertion order)
        self._pending: Dict[str, "OrderedDict[str, None]"] = {}
        # class_name -> {primary_key: entity}
        self._loaded: Dict[str, Dict[str, Any]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def register(self, references: Iterable[RawReference]) -> None:
        with self._registry_lock:
            for ref in references:
                if ref.class_name in self._loaded:
                    # Class already fetched; this key will not be loaded
                    log.debug("hydration.late_register class=%s key=%s", ref.class_name, ref.primary_key)
                self._pending.setdefault(ref.class_name, OrderedDict())[ref.primary_key] = None

    def is_loaded(self, class_name: str) -> bool:
        return class_name in self._loaded

    def _lock_for(self, class_name: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(class_name)
            if lock is None:
                lock = self._locks[class_name] = threading.Lock()
            return lock

    def _fetch_class(self, class_name: str, wanted: Sequence[str]) -> Dict[str, Any]:
        cached = self._loaded.get(class_name)
        if cached is not None:
            return cached

        # Single-flight: concurrent first accessors queue on the same lock
        with self._lock_for(class_name):
            cached = self._loaded.get(class_name)
            if cached is not None:
                return cached

            with self._registry_lock:
                keys = OrderedDict(self._pending.get(class_name, ()))
            for key in wanted:
                keys[key] = None

            if self.loader is None:
                raise RuntimeError("No entity loader configured; cannot hydrate results")

            log.debug("hydration.fetch class=%s keys=%d", class_name, len(keys))
            entities = self.loader.load_all(class_name, list(keys))
            by_key = {self.loader.primary_key(e): e for e in entities}

            missing = [k for k in keys if k not in by_key]
            if missing:
                log.warning(
                    "hydration.missing class=%s count=%d keys=%s",
                    class_name, len(missing), missing[:10],
                )
            self._loaded[class_name] = by_key
            return by_key

    def hydrate(self, references: Sequence[RawReference]) -> Dict[RawReference, Any]:
        """
        Return a mapping of reference -> entity. References whose entity could
        not be found are absent from the mapping (or raise in strict mode).
        """
        by_class: Dict[str, List[str]] = {}
        for ref in references:
            by_class.setdefault(ref.class_name, []).append(ref.primary_key)

        out: Dict[RawReference, Any] = {}
        for class_name, keys in by_class.items():
            loaded = self._fetch_class(class_name, keys)
            for key in keys:
                entity = loaded.get(key)
                if entity is None:
                    if self.strict:
                        raise MissingEntityError(class_name, key)
                    continue
                out[RawReference(class_name, key)] = entity
        return out

    def instance(self, reference: RawReference) -> Any:
        return self.hydrate([reference]).get(reference)
