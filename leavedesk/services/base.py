import logging
from sqlalchemy.orm import Session


class BaseService:
    """Holds the request-scoped session and a logger named after the concrete service."""

    def __init__(self, db: Session):
        self.db = db
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
