"""Session Store backed by the ``sessions`` table."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from soul_log.core.auth.models import SessionRecord
from soul_log.core.auth.session_models import StoredSession
from soul_log.core.errors import DependencyUnavailable
from soul_log.extensions import db

logger = logging.getLogger(__name__)


class SessionRepository:
    """Persistence for session rows. Every write commits; failures surface as DependencyUnavailable."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def create(self, token: str, data: dict, expiry: datetime) -> StoredSession:
        try:
            self.session.add(SessionRecord(token=token, data=dict(data), expiry=expiry))
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("create session", exc)
        return StoredSession(token=token, data=dict(data), expiry=expiry)

    def get(self, token: str) -> Optional[StoredSession]:
        try:
            record = self.session.get(SessionRecord, token, populate_existing=True)
        except SQLAlchemyError as exc:
            self._fail("load session", exc)
        if record is None:
            return None
        return StoredSession(token=record.token, data=dict(record.data or {}), expiry=record.expiry)

    def save(self, token: str, data: dict, expiry: datetime) -> None:
        """Replace the payload and expiry of an existing row; missing rows are recreated."""
        try:
            record = self.session.get(SessionRecord, token)
            if record is None:
                self.session.add(SessionRecord(token=token, data=dict(data), expiry=expiry))
            else:
                record.data = dict(data)
                record.expiry = expiry
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("save session", exc)

    def touch(self, token: str, expiry: datetime) -> None:
        try:
            self.session.query(SessionRecord).filter_by(token=token).update(
                {"expiry": expiry}, synchronize_session=False
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("extend session", exc)

    def destroy(self, token: str) -> bool:
        try:
            deleted = self.session.query(SessionRecord).filter_by(token=token).delete(synchronize_session=False)
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("destroy session", exc)
        return bool(deleted)

    def purge_expired(self, now: datetime) -> int:
        try:
            deleted = (
                self.session.query(SessionRecord)
                .filter(SessionRecord.expiry <= now)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            self._fail("purge sessions", exc)
        return int(deleted or 0)

    def count_expired(self, now: datetime) -> int:
        try:
            return self.session.query(SessionRecord).filter(SessionRecord.expiry <= now).count()
        except SQLAlchemyError as exc:
            self._fail("count sessions", exc)

    def _fail(self, action: str, exc: SQLAlchemyError):
        self.session.rollback()
        logger.warning("Session store failed to %s: %s", action, exc.__class__.__name__)
        raise DependencyUnavailable() from exc


__all__ = ["SessionRepository"]
