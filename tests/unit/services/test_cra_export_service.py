from __future__ import annotations

from datetime import date
from decimal import Decimal

from foresy.models import CraEntry, CraEntryCra
from foresy.models.enums import CraStatus
from foresy.services.cra_entry_service import CraEntryService
from foresy.services.cra_export_service import CraExportService, export_filename

HEADER = "date,mission_name,quantity,unit_price_eur,line_total_eur,description"


def test_empty_cra_exports_header_and_zero_total(db_session, freelancer, make_cra):
    cra = make_cra(freelancer, month=2, year=2026)

    result = CraExportService(db_session).export(freelancer, cra.id)

    content = result.value("content")
    assert content.startswith("\ufeff")
    assert content.lstrip("\ufeff").splitlines() == [HEADER, "TOTAL,,0.00,,0.00,"]
    assert result.value("filename") == "cra_2026_02.csv"


def test_rows_use_major_units(db_session, freelancer, make_cra, make_mission, make_company):
    cra = make_cra(freelancer)
    mission = make_mission(freelancer, make_company(name="Export Co"), name="Audit")
    service = CraEntryService(db_session)
    service.create(freelancer, cra.id, {"date": "2026-01-15", "quantity": 1.5, "unit_price": 50000, "mission_id": mission.id})
    service.create(freelancer, cra.id, {"date": "2026-01-16", "quantity": 1, "unit_price": 12345, "description": "Setup"})

    lines = CraExportService(db_session).export(freelancer, cra.id).value("content").lstrip("\ufeff").splitlines()

    assert lines == [
        HEADER,
        "2026-01-15,Audit,1.50,500.00,750.00,",
        "2026-01-16,Mission sans nom,1.00,123.45,123.45,Setup",
        "TOTAL,,2.50,,873.45,",
    ]


def test_include_entries_false_keeps_only_total(db_session, freelancer, make_cra):
    cra = make_cra(freelancer)
    CraEntryService(db_session).create(freelancer, cra.id, {"date": "2026-01-15", "quantity": 1, "unit_price": 50000})

    lines = CraExportService(db_session).export(freelancer, cra.id, include_entries=False).value("content").splitlines()

    assert lines[1:] == ["TOTAL,,1.00,,500.00,"]


def test_unsupported_format_is_rejected(db_session, freelancer, make_cra):
    cra = make_cra(freelancer)

    assert CraExportService(db_session).export(freelancer, cra.id, export_format="pdf").status == "validation_error"


def test_filename_pads_month():
    assert export_filename(2026, 1) == "cra_2026_01.csv"


def test_export_never_writes_to_a_locked_cra(db_session, freelancer, make_cra):
    cra = make_cra(freelancer, status=CraStatus.LOCKED)
    entry = CraEntry(date=date(2026, 1, 15), quantity=Decimal("2.00"), unit_price=10000)
    entry.cra_link = CraEntryCra(cra_id=cra.id)
    db_session.add(entry)
    db_session.commit()
    stored_updated_at = cra.updated_at

    lines = CraExportService(db_session).export(freelancer, cra.id).value("content").splitlines()

    assert lines[-1] == "TOTAL,,2.00,,200.00,"
    assert not db_session.dirty
    db_session.refresh(cra)
    assert cra.total_days == Decimal("0")
    assert cra.total_amount == 0
    assert cra.updated_at == stored_updated_at
