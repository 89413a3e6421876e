"""
Helpers for building parameterized SQL fragments.

The CRUD modules use these to turn sparse, caller-supplied fields into
`$n`-numbered SQL fragments for PATCH-style updates and for filtered
listings. Caller values only ever travel as bound parameters; the only
caller input that reaches the SQL text is a field name, and only after
being mapped and quoted as an identifier.
"""

import re
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Result
from sqlalchemy.orm import Session

from jobly.core.exceptions import ValidationError

_PLACEHOLDER = re.compile(r"\$(\d+)")


class SqlFragment(NamedTuple):
    """A piece of SQL and the values for its `$1..$n` placeholders, in order."""
    sql: str
    values: Tuple[Any, ...]


class FieldMap(Mapping[str, str]):
    """
    Read-only mapping from API field names to column names.

    Only fields whose column is named differently need an entry; any
    other name maps to itself.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = MappingProxyType(dict(mapping or {}))

    def __getitem__(self, field: str) -> str:
        return self._mapping[field]

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self):
        return f"<FieldMap({dict(self._mapping)!r})>"


def quote_identifier(name: str) -> str:
    """Double-quote a column name, doubling any embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def sql_for_partial_update(data: Mapping[str, Any], field_map: Mapping[str, str]) -> SqlFragment:
    """
    Build the SET part of a partial UPDATE.

    Args:
        data: Fields to change, e.g. {"name": "New", "numEmployees": 10}.
              Key order decides clause order and placeholder numbering.
        field_map: Field name -> column name for fields whose column differs,
                   e.g. {"numEmployees": "num_employees"}

    Returns:
        SqlFragment('"name"=$1, "num_employees"=$2', ("New", 10))

    Raises:
        ValidationError: If `data` is empty
    """
    if not data:
        raise ValidationError("No data")

    # {"firstName": "Aliya", "age": 32} => ['"first_name"=$1', '"age"=$2']
    cols = [
        f"{quote_identifier(field_map.get(field, field))}=${idx}"
        for idx, field in enumerate(data, start=1)
    ]

    return SqlFragment(", ".join(cols), tuple(data.values()))


def _provided(value: Any) -> bool:
    return value is not None


def _is_true(value: Any) -> bool:
    return value is True


def _as_is(value: Any) -> Any:
    return value


def _substring(value: Any) -> str:
    return f"%{value}%"


@dataclass(frozen=True)
class Criterion:
    """
    One named filter a PredicateBuilder knows about.

    `template` is the predicate text; `{}` in it is replaced by the
    placeholder number. A criterion with `bind=None` binds no value and
    uses no placeholder.
    """
    key: str
    template: str
    is_active: Callable[[Any], bool] = _provided
    bind: Optional[Callable[[Any], Any]] = _as_is


def at_least(key: str, column: str) -> Criterion:
    return Criterion(key, f"{column} >= ${{}}")


def at_most(key: str, column: str) -> Criterion:
    return Criterion(key, f"{column} <= ${{}}")


def contains(key: str, column: str) -> Criterion:
    """Case-insensitive substring match."""
    return Criterion(key, f"{column} ILIKE ${{}}", bind=_substring)


def flag(key: str, predicate: str) -> Criterion:
    """Fixed predicate, applied only when the filter value is exactly True."""
    return Criterion(key, predicate, is_active=_is_true, bind=None)


class PredicateBuilder:
    """
    Builds a WHERE clause from a fixed, ordered list of criteria.

    Criteria are always evaluated in the order given here, so for the same
    filters the clause text and placeholder numbering never change.
    """

    def __init__(self, criteria: Sequence[Criterion]):
        self.criteria = tuple(criteria)

    def build_where(self, filters: Mapping[str, Any]) -> SqlFragment:
        """
        Args:
            filters: Filter name -> value; names not known to this builder are ignored

        Returns:
            SqlFragment("WHERE salary >= $1 AND title ILIKE $2", (150, "%dev%")),
            or an empty fragment when no criterion is active
        """
        def step(acc, criterion):
            predicates, values = acc
            value = filters.get(criterion.key)
            if not criterion.is_active(value):
                return acc
            if criterion.bind is None:
                return predicates + (criterion.template,), values
            values = values + (criterion.bind(value),)
            return predicates + (criterion.template.format(len(values)),), values

        predicates, values = reduce(step, self.criteria, ((), ()))

        if not predicates:
            return SqlFragment("", ())

        return SqlFragment("WHERE " + " AND ".join(predicates), values)


def bind_positional(statement: str, values: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite `$n` placeholders as SQLAlchemy named binds (`:p1`, `:p2`, ...).

    Raises:
        ValueError: If a placeholder has no matching value
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}

    def replace(match):
        name = f"p{match.group(1)}"
        if name not in params:
            raise ValueError(f"No value supplied for placeholder ${match.group(1)}")
        return ":" + name

    return _PLACEHOLDER.sub(replace, statement), params


def execute(
    db: Session,
    statement: str,
    values: Sequence[Any] = (),
    columns: Optional[Mapping[str, Any]] = None,
) -> Result:
    """
    Execute a `$n`-numbered statement on the session.

    Args:
        db: Database session
        statement: SQL text using `$1..$n` placeholders
        values: Values for the placeholders, in order
        columns: Optional result label -> SQLAlchemy type, for results that need
                 conversion (e.g. NUMERIC to Decimal)

    Returns:
        SQLAlchemy Result
    """
    # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
    if db.get_bind().dialect.name == "sqlite":
        statement = statement.replace(" ILIKE ", " LIKE ")

    sql, params = bind_positional(statement, values)
    clause = text(sql)
    if columns:
        clause = clause.columns(**columns)

    return db.execute(clause, params)
