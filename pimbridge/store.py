"""
The contact store: persists bounded contact records and runs filtered finds.

Filter expressions from `pimbridge.filter` are compiled into SQLAlchemy
clauses. REGEX matches use SQLite's REGEXP operator, which the pysqlite
dialect backs with Python's `re.search`. Address and category identifiers
become `any()` sub-queries on their child tables.
"""

from typing import List, Optional

from sqlalchemy import String, and_, false, or_, type_coerce
from sqlalchemy.orm import Session

from pimbridge.filter import AND, EQUALS, OR, REGEX, BooleanExpression, FieldMatch, uid_filter
from shared.models.pim import (
    ADDRESS_ATTRIBUTES,
    ADDRESS_SLOTS,
    BACKING_ATTRIBUTES,
    PimAddressORM,
    PimCategoryORM,
    PimContactORM,
)

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")


def _compare(column, match: FieldMatch):
    if match.operator == REGEX:
        # birthday is a Date column; match against its stored text
        return type_coerce(column, String).regexp_match(match.value)
    if match.operator == EQUALS:
        return column == match.value
    logger.warning(f"Unsupported filter operator '{match.operator}' on {match.field}.")
    return false()


class ContactStore:
    """Backing store for `PimContactORM` records, bound to one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _match_clause(self, match: FieldMatch):
        identifier = match.field

        if identifier == "categories":
            return PimContactORM.category_rows.any(_compare(PimCategoryORM.name, match))

        slot, _, component = identifier.partition(".")
        if slot in ADDRESS_SLOTS:
            attribute = ADDRESS_ATTRIBUTES.get(component)
            if attribute is None:
                return false()
            return PimContactORM.addresses.any(and_(
                PimAddressORM.kind == ADDRESS_SLOTS[slot],
                _compare(getattr(PimAddressORM, attribute), match),
            ))

        attribute = BACKING_ATTRIBUTES.get(identifier)
        if attribute is None:
            logger.warning(f"Unknown backing field '{identifier}' in filter.")
            return false()
        return _compare(getattr(PimContactORM, attribute), match)

    def _clause(self, expression):
        if isinstance(expression, BooleanExpression):
            left = self._clause(expression.left)
            right = self._clause(expression.right)
            if expression.operator == OR:
                return or_(left, right)
            if expression.operator == AND:
                return and_(left, right)
            raise ValueError(f"Unsupported boolean operator '{expression.operator}'")
        return self._match_clause(expression)

    def find(self, expression=None, sort: Optional[str] = None, max_results: int = -1) -> List[PimContactORM]:
        """
        Find records matching a filter expression.

        Args:
            expression: A filter expression, or None to match every record.
            sort (Optional[str]): Backing identifier to order by; insertion order otherwise.
            max_results (int): Maximum number of records, -1 for no limit.

        Returns:
            List[PimContactORM]: The matching records.
        """
        query = self.db.query(PimContactORM)
        if expression is not None:
            query = query.filter(self._clause(expression))

        attribute = BACKING_ATTRIBUTES.get(sort) if sort else None
        query = query.order_by(getattr(PimContactORM, attribute) if attribute else PimContactORM.id)

        if max_results is not None and max_results >= 0:
            query = query.limit(max_results)
        return query.all()

    def find_by_uid(self, uid: Optional[str]) -> Optional[PimContactORM]:
        if not uid:
            return None
        records = self.find(uid_filter(uid), max_results=1)
        return records[0] if records else None

    def persist(self, record: PimContactORM) -> PimContactORM:
        """Add or update a record and commit; a new record gets its uid here."""
        try:
            self.db.add(record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(record)
        logger.debug(f"Persisted contact {record.uid}.")
        return record

    def remove(self, record: PimContactORM):
        try:
            self.db.delete(record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.debug(f"Removed contact {record.uid}.")
