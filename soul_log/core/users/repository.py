"""Identity Store backed by the ``users`` table."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from soul_log.core.auth.schemas import ExternalProfile
from soul_log.core.errors import DependencyUnavailable
from soul_log.core.users.models import User, _new_user_id
from soul_log.core.users.schemas import UserProfile
from soul_log.extensions import db

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserRepository:
    """Reads and upserts users keyed by their external provider id."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def get(self, user_id: str) -> Optional[UserProfile]:
        try:
            user = self.session.get(User, user_id)
        except SQLAlchemyError as exc:
            self._fail("load user", exc)
        return UserProfile.model_validate(user) if user else None

    def get_by_external_id(self, external_provider_id: str) -> Optional[UserProfile]:
        try:
            user = self.session.query(User).filter_by(external_provider_id=external_provider_id).first()
        except SQLAlchemyError as exc:
            self._fail("load user", exc)
        return UserProfile.model_validate(user) if user else None

    def upsert_by_external_id(self, profile: ExternalProfile) -> UserProfile:
        """Insert the user or refresh email/name/avatar when the external id exists."""
        now = datetime.utcnow()
        fields = {
            "email": profile.primary_email,
            "name": profile.display_name,
            "avatar_url": profile.primary_photo,
        }
        try:
            insert = _UPSERT_DIALECTS.get(self.session.get_bind().dialect.name)
            if insert is not None:
                stmt = insert(User).values(
                    id=_new_user_id(),
                    external_provider_id=profile.id,
                    created_at=now,
                    updated_at=now,
                    **fields,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[User.external_provider_id],
                    set_={**fields, "updated_at": now},
                )
                self.session.execute(stmt)
            else:
                self._select_then_write(profile.id, fields, now)
            self.session.commit()
            user = (
                self.session.query(User).filter_by(external_provider_id=profile.id)
                .populate_existing()
                .one()
            )
        except SQLAlchemyError as exc:
            self._fail("upsert user", exc)
        logger.info("Upserted user %s for external identity", user.id)
        return UserProfile.model_validate(user)

    def _select_then_write(self, external_id: str, fields: dict, now: datetime) -> None:
        user = self.session.query(User).filter_by(external_provider_id=external_id).first()
        if user is None:
            try:
                with self.session.begin_nested():
                    self.session.add(User(external_provider_id=external_id, created_at=now, updated_at=now, **fields))
                return
            except IntegrityError:
                # Lost a first-login race; the row exists now.
                user = self.session.query(User).filter_by(external_provider_id=external_id).one()
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = now

    def _fail(self, action: str, exc: SQLAlchemyError):
        self.session.rollback()
        logger.warning("Identity store failed to %s: %s", action, exc.__class__.__name__)
        raise DependencyUnavailable() from exc
