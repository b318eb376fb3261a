"""
SearchSession: executes a query through the transport and wraps the raw
response in a ResultSet bound to the entity loader.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..config import Settings, settings as default_settings
from ..utils.logging import correlation_id
from .coercion import ValueCoercer
from .fields import FieldNameCodec
from .interfaces import EntityLoader, Transport
from .query import SearchQuery
from .result_set import ResultSet

log = logging.getLogger("search.session")


class SearchSession:
    def __init__(
        self,
        transport: Transport,
        loader: Optional[EntityLoader] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.transport = transport
        self.loader = loader
        self.settings = settings or default_settings
        # Built once per session so every ResultSet shares one suffix table
        self.codec = FieldNameCodec.from_settings(self.settings)
        self.coercer = ValueCoercer()

    def search(self, query: SearchQuery) -> ResultSet:
        with correlation_id():
            start = time.perf_counter()
            raw = self.transport.execute(query)
            result = ResultSet(
                raw,
                query,
                self.loader,
                settings=self.settings,
                codec=self.codec,
                coercer=self.coercer,
            )
            log.info(
                "search.done types=%s total=%d duration_ms=%.1f",
                ",".join(query.types), result.total, (time.perf_counter() - start) * 1000.0,
            )
            return result
