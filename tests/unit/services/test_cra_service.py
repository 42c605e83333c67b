from __future__ import annotations

from datetime import date
from dataclasses import replace
from decimal import Decimal

import pytest
from sqlalchemy import select

from foresy.core.config import get_config
from foresy.models import CraEntry, CraEntryCra, UserCra
from foresy.models.enums import CraStatus, RelationRole
from foresy.services.cra_service import CraService, line_total, recalculate_totals


def _add_entry(db_session, cra, quantity="1.0", unit_price=50000, entry_date=date(2026, 1, 15)):
    entry = CraEntry(date=entry_date, quantity=Decimal(quantity), unit_price=unit_price)
    entry.cra_link = CraEntryCra(cra_id=cra.id)
    db_session.add(entry)
    db_session.commit()
    return entry


def test_line_total_rounds_half_up():
    assert line_total(Decimal("1.0"), 50000) == 50000
    assert line_total(Decimal("0.5"), 3) == 2
    assert line_total(Decimal("0.25"), 10) == 3


def test_recalculate_totals_ignores_deleted_entries(db_session, freelancer, make_cra):
    cra = make_cra(freelancer)
    _add_entry(db_session, cra, "1.0", 50000)
    _add_entry(db_session, cra, "0.5", 50000, date(2026, 1, 16))
    deleted = _add_entry(db_session, cra, "2.0", 50000, date(2026, 1, 17))
    deleted.discard()

    recalculate_totals(db_session, cra)

    assert cra.total_days == Decimal("1.50")
    assert cra.total_amount == 75000


def test_create_rules(db_session, freelancer, make_user):
    service = CraService(db_session)

    created = service.create(freelancer, {"month": 1, "year": 2026})
    assert created.status == "created"
    assert created.value("cra")["status"] == "draft"
    assert created.value("cra")["total_days"] == 0.0

    assert service.create(freelancer, {"month": 1, "year": 2026}).status == "conflict"
    assert service.create(freelancer, {"month": 13, "year": 2026}).status == "validation_error"
    assert service.create(freelancer, {"month": 2, "year": 1999}).status == "validation_error"
    assert service.create(freelancer, {"month": 2, "year": date.today().year + 6}).status == "validation_error"
    assert service.create(freelancer, {"month": 2}).status == "bad_request"
    assert service.create(freelancer, {"month": 2, "year": 2026, "currency": "ABC"}).status == "validation_error"
    assert service.create(make_user(), {"month": 2, "year": 2026}).status == "forbidden"


def test_deleted_cra_frees_its_period(db_session, freelancer, make_cra):
    cra = make_cra(freelancer, month=3)
    service = CraService(db_session)

    assert service.destroy(freelancer, cra.id).success
    assert service.create(freelancer, {"month": 3, "year": 2026}).status == "created"


def test_destroy_requires_empty_draft(db_session, freelancer, make_cra):
    with_entry = make_cra(freelancer, month=1)
    _add_entry(db_session, with_entry)
    submitted = make_cra(freelancer, month=2, status=CraStatus.SUBMITTED)
    service = CraService(db_session)

    assert service.destroy(freelancer, with_entry.id).status == "conflict"
    assert service.destroy(freelancer, submitted.id).status == "conflict"


def test_submit_and_lock_lifecycle(db_session, freelancer, make_cra):
    cra = make_cra(freelancer)
    service = CraService(db_session)

    empty = service.submit(freelancer, cra.id)
    assert empty.status == "validation_error"
    assert service.lock(freelancer, cra.id).status == "validation_error"

    _add_entry(db_session, cra)
    submitted = service.submit(freelancer, cra.id).value("cra")
    assert submitted["status"] == "submitted"
    assert submitted["submitted_at"] is not None
    assert submitted["total_amount"] == 50000
    assert service.submit(freelancer, cra.id).status == "validation_error"
    assert service.update(freelancer, cra.id, {"description": "late"}).status == "conflict"

    locked = service.lock(freelancer, cra.id).value("cra")
    assert locked["status"] == "locked"
    assert locked["locked_at"] is not None
    assert service.lock(freelancer, cra.id).status == "conflict"


def test_other_users_cannot_see_or_change_a_cra(db_session, freelancer, make_user, make_cra):
    cra = make_cra(freelancer)
    other = make_user()
    service = CraService(db_session)

    assert service.get(other, cra.id).status == "not_found"
    assert service.submit(other, cra.id).status == "forbidden"


class TestListFilters:
    @pytest.fixture
    def cras(self, freelancer, make_cra):
        return [
            make_cra(freelancer, month=1, year=2025),
            make_cra(freelancer, month=2, year=2026),
            make_cra(freelancer, month=3, year=2026, status=CraStatus.SUBMITTED),
        ]

    def test_month_without_year_is_rejected(self, db_session, freelancer, cras):
        result = CraService(db_session).list(freelancer, month=1)

        assert result.status == "validation_error"
        assert result.error == "month_requires_year"

    @pytest.mark.parametrize(
        "filters",
        [{"year": 2026, "month": 13}, {"year": 1999}, {"year": 2026, "status": "archived"}, {"year": "abc"}],
    )
    def test_invalid_filters(self, db_session, freelancer, cras, filters):
        assert CraService(db_session).list(freelancer, **filters).status == "validation_error"

    def test_year_filter_is_exact(self, db_session, freelancer, cras):
        result = CraService(db_session).list(freelancer, year=2026)

        assert [(c["year"], c["month"]) for c in result.value("cras")] == [(2026, 3), (2026, 2)]

    def test_year_and_status_compose(self, db_session, freelancer, cras):
        result = CraService(db_session).list(freelancer, year=2026, status="submitted")

        assert [c["month"] for c in result.value("cras")] == [3]

    def test_blank_status_is_ignored_and_meta_is_returned(self, db_session, freelancer, cras):
        result = CraService(db_session).list(freelancer, status="", per_page=2)

        assert len(result.value("cras")) == 2
        assert result.meta["total"] == 3
        assert result.meta["next"] == 2


def test_create_links_creator_through_user_cra(db_session, freelancer):
    cra = CraService(db_session).create(freelancer, {"month": 3, "year": 2026}).value("cra")

    link = db_session.scalar(select(UserCra).where(UserCra.cra_id == cra["id"]))
    assert link is not None
    assert link.user_id == freelancer.id
    assert link.role == RelationRole.CREATOR


def test_relation_driven_flag_off_skips_user_cra(db_session, freelancer):
    service = CraService(db_session, settings=replace(get_config(), RELATION_DRIVEN=False))

    cra = service.create(freelancer, {"month": 4, "year": 2026}).value("cra")

    assert db_session.scalar(select(UserCra).where(UserCra.cra_id == cra["id"])) is None
