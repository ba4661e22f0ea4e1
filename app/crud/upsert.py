# crud/upsert.py
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

# Dialects with INSERT ... ON CONFLICT support
_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def conflict_insert(db: Session, model):
    """
    Dialect-specific INSERT construct exposing ``on_conflict_do_nothing`` and
    ``on_conflict_do_update``.

    Raises:
        NotImplementedError: If the bound database has no ON CONFLICT support
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise NotImplementedError(f"ON CONFLICT inserts are not supported on {dialect}")
    return insert(model)
