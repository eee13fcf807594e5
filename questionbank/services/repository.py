"""Query layer over one item collection."""

import logging
import uuid
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from questionbank.services.tiers import Difficulty, TIERS

logger = logging.getLogger(__name__)


class ItemRepository:
    """Count, range-read and insert items of one catalog entry.

    Reads always project an explicit column allowlist, so answer-key
    columns are never loaded unless a caller asks for them by name.
    """

    def __init__(self, db: Session, entry):
        self.db = db
        self.entry = entry
        self.model = entry.model

    def _filtered(self, query, domain: str, difficulty: Optional[Difficulty], exclude_ids: Optional[Iterable[str]]):
        query = query.filter(self.model.domain == domain)
        if difficulty is not None:
            query = query.filter(self.model.difficulty == Difficulty(difficulty).value)
        exclude_ids = list(exclude_ids or [])
        if exclude_ids:
            query = query.filter(self.model.id.notin_(exclude_ids))
        return query

    def count(self, domain: str, difficulty: Optional[Difficulty] = None, exclude_ids: Optional[Iterable[str]] = None) -> int:
        query = self._filtered(self.db.query(func.count(self.model.id)), domain, difficulty, exclude_ids)
        return query.scalar() or 0

    def range_read(
        self,
        domain: str,
        difficulty: Optional[Difficulty] = None,
        offset: int = 0,
        limit: int = 10,
        fields: Optional[Iterable[str]] = None,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> list[dict]:
        """Read a contiguous slice ordered by id, projecting only ``fields``."""
        if limit <= 0:
            return []
        fields = tuple(fields or self.entry.public_fields)
        columns = [getattr(self.model, name) for name in fields]
        query = self._filtered(self.db.query(*columns), domain, difficulty, exclude_ids)
        rows = query.order_by(self.model.id).offset(max(0, offset)).limit(limit).all()
        return [dict(row._mapping) for row in rows]

    def inventory(self, domain: str) -> dict:
        rows = (
            self.db.query(self.model.difficulty, func.count(self.model.id))
            .filter(self.model.domain == domain)
            .group_by(self.model.difficulty)
            .all()
        )
        by_difficulty = {tier.value: 0 for tier in TIERS}
        for difficulty, n in rows:
            by_difficulty[difficulty] = by_difficulty.get(difficulty, 0) + n
        return {"total": sum(by_difficulty.values()), **by_difficulty}

    def get(self, item_id: str):
        """Full row including the answer key; server-side use only."""
        return self.db.query(self.model).filter(self.model.id == item_id).first()

    def insert_many(self, items: list[dict]) -> list[str]:
        """Insert normalized items in one transaction, falling back to row-by-row on failure.

        Returns the ids that were actually stored.
        """
        if not items:
            return []
        rows = [self.model(id=str(uuid.uuid4()), **item) for item in items]
        ids = [row.id for row in rows]
        try:
            self.db.add_all(rows)
            self.db.commit()
            return ids
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Bulk insert of %d %s failed (%s), inserting individually",
                           len(rows), self.entry.kind.value, e)

        inserted: list[str] = []
        for item in items:
            item_id = str(uuid.uuid4())
            try:
                self.db.add(self.model(id=item_id, **item))
                self.db.commit()
                inserted.append(item_id)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Error inserting %s for %s: %s", self.entry.kind.value, item.get("domain"), e)
        return inserted
