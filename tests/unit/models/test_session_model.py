from __future__ import annotations

from datetime import timedelta

from foresy.models import UserSession
from foresy.models.base import as_utc, utcnow


def test_refresh_slides_expiry_and_bumps_activity(db_session, make_user):
    user = make_user()
    session = UserSession(user_id=user.id, expires_at=utcnow() + timedelta(minutes=1))
    db_session.add(session)
    db_session.commit()

    session.refresh(timedelta(hours=24))

    assert as_utc(session.expires_at) > utcnow() + timedelta(hours=23)
    assert session.is_active


def test_expire_deactivates_session(db_session, make_user):
    user = make_user()
    session = UserSession(user_id=user.id, expires_at=utcnow() + timedelta(hours=1))
    db_session.add(session)
    db_session.commit()

    session.expire()
    db_session.commit()

    assert not session.is_active
    assert session.token


def test_soft_delete_mixin_marks_row(db_session, make_user, make_cra):
    cra = make_cra(make_user())

    assert not cra.is_discarded
    cra.discard()
    first = cra.deleted_at
    cra.discard()

    assert cra.is_discarded
    assert cra.deleted_at == first
