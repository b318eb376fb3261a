"""
SQLAlchemy entity loader.

One ``SELECT ... WHERE <pk> IN (...)`` per `load_all` call. Models are
looked up by class name, either from an explicit mapping or from every
class mapped on a declarative base's registry.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

log = logging.getLogger("search.loader")


def _key_converter(column) -> Any:
    try:
        py_type = column.type.python_type
    except NotImplementedError:
        return str
    return py_type if py_type in (int, str) else str


class SQLAlchemyEntityLoader:
    """Implements the `EntityLoader` protocol on top of a SQLAlchemy Session."""

    def __init__(
        self,
        session: Session,
        models: Optional[Mapping[str, Type[Any]]] = None,
        *,
        base: Optional[Any] = None,
    ) -> None:
        self.session = session
        self.models: Dict[str, Type[Any]] = dict(models or {})
        if base is not None:
            for mapper in base.registry.mappers:
                self.models.setdefault(mapper.class_.__name__, mapper.class_)

    def model_for(self, class_name: str) -> Type[Any]:
        try:
            return self.models[class_name]
        except KeyError:
            raise LookupError(f"No mapped model registered for {class_name!r}") from None

    def load_all(self, class_name: str, primary_keys: Sequence[str]) -> List[Any]:
        if not primary_keys:
            return []
        model = self.model_for(class_name)
        pk_cols = inspect(model).primary_key
        if len(pk_cols) != 1:
            raise LookupError(f"{class_name} has a composite primary key; not supported")
        pk = pk_cols[0]

        convert = _key_converter(pk)
        keys: List[Any] = []
        for k in primary_keys:
            try:
                keys.append(convert(k))
            except ValueError:
                log.warning("loader.bad_key class=%s key=%r", class_name, k)

        stmt = select(model).where(pk.in_(keys))
        return list(self.session.scalars(stmt))

    def primary_key(self, entity: Any) -> str:
        identity = inspect(entity).identity
        if identity is None:
            raise ValueError(f"{entity!r} is not persistent")
        return str(identity[0])
