"""
repository.py — Blob Persistence (SQLAlchemy)

Purpose:
- Read and upsert the one-row-per-user JSON blobs behind the persistence API
- List saved project names

Upsert: update the blob if a row exists for the user, else insert.
Last write wins; there is no transaction spanning resources.
"""

import datetime
from typing import List, Optional, Type

from sqlalchemy.orm import Session

from fincast.core.logging import get_logger
from fincast.models.financial_data import FinancialData
from fincast.services.persistence.blobs import DEFAULT_PROJECT_NAME, parse_blob

logger = get_logger(__name__)


def get_blob_row(db: Session, model: Type, user_id: int):
    """Latest row for `user_id`, or None."""
    return (
        db.query(model)
        .filter(model.user_id == user_id)
        .order_by(model.id.desc())
        .first()
    )


def upsert_blob(db: Session, model: Type, blob_field: str, user_id: int, blob: str):
    """
    Store `blob` verbatim in `blob_field` for `user_id`.

    Returns the persisted row (refreshed).
    """
    row = get_blob_row(db, model, user_id)
    if row is None:
        row = model(user_id=user_id, **{blob_field: blob})
        db.add(row)
        action = "Inserted"
    else:
        setattr(row, blob_field, blob)
        row.updated_at = datetime.datetime.utcnow()
        action = "Updated"

    db.commit()
    db.refresh(row)
    logger.info("%s %s for user %s", action, model.__tablename__, user_id)
    return row


def list_project_names(db: Session) -> List[str]:
    """
    Names of every stored financial-data snapshot, unfiltered.

    A snapshot without a name (or with an unreadable blob) is listed as
    "Untitled Project".
    """
    names: List[str] = []
    for row in db.query(FinancialData).order_by(FinancialData.id).all():
        data: Optional[dict] = parse_blob(row.data_json)
        name = data.get("name") if data else None
        names.append(str(name) if name else DEFAULT_PROJECT_NAME)
    return names
