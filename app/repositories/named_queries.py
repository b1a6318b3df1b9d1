"""네임드 쿼리 레지스트리 — 이름으로 등록된 SELECT 문과 시작 시 검증.

Named query registry.
Statements are registered under a "<Entity>.<queryName>" key with named bind
parameters and executed by repositories through ``get_named_query``.
``validate_named_queries`` compiles every registered statement against the
engine dialect during application startup, so a malformed query or a
projection whose columns do not match its target class stops the
application before it serves traffic.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from sqlalchemy import Select
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import SQLAlchemyError

from app.utils.exceptions import QueryDefinitionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedQuery:
    """등록된 네임드 쿼리.

    Attributes:
        name: 쿼리 이름 (Registry key, e.g. "Member.findByUsername")
        statement: SELECT 문 (Statement with named bind parameters)
        projection: 결과 행을 담을 DTO 클래스 (Projection target, optional)
    """

    name: str
    statement: Select[Any]
    projection: type[BaseModel] | None = None


_registry: dict[str, NamedQuery] = {}


def register_named_query(
    name: str,
    statement: Select[Any],
    projection: type[BaseModel] | None = None,
) -> NamedQuery:
    """쿼리를 레지스트리에 등록합니다.

    Register ``statement`` under ``name``. Registering the same name twice
    is a definition error.
    """
    if name in _registry:
        raise QueryDefinitionError(name, "already registered")
    named: NamedQuery = NamedQuery(name=name, statement=statement, projection=projection)
    _registry[name] = named
    return named


def get_named_query(name: str) -> NamedQuery:
    """이름으로 쿼리를 조회합니다. 없으면 QueryDefinitionError."""
    try:
        return _registry[name]
    except KeyError:
        raise QueryDefinitionError(name, "no such named query") from None


def named_queries() -> list[NamedQuery]:
    return list(_registry.values())


def _check_projection(named: NamedQuery) -> None:
    """프로젝션 컬럼 라벨과 DTO 필드가 일치하는지 확인합니다."""
    if named.projection is None:
        return
    selected: list[str] = list(named.statement.selected_columns.keys())
    expected: list[str] = list(named.projection.model_fields.keys())
    if selected != expected:
        raise QueryDefinitionError(
            named.name,
            f"projection columns {selected} do not match "
            f"{named.projection.__name__}{tuple(expected)}",
        )


def validate_named_queries(dialect: Dialect) -> int:
    """등록된 모든 쿼리를 방언에 맞춰 컴파일해 검증합니다.

    Compile every registered query for ``dialect`` and check projection
    signatures.

    Args:
        dialect: 대상 DB 방언 (Target database dialect, e.g. ``engine.dialect``)

    Returns:
        int: 검증된 쿼리 수 (Number of validated queries)

    Raises:
        QueryDefinitionError: 컴파일 또는 시그니처 검증 실패 시
                              (Compilation or signature check failure)
    """
    for named in _registry.values():
        try:
            named.statement.compile(dialect=dialect)
        except SQLAlchemyError as exc:
            logger.error("Named query %s failed to compile: %s", named.name, exc)
            raise QueryDefinitionError(named.name, str(exc)) from exc
        _check_projection(named)

    logger.info("Validated %d named queries for dialect %s", len(_registry), dialect.name)
    return len(_registry)
