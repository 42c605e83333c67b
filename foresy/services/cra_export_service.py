"""CSV export of a CRA and its entries."""

from __future__ import annotations

import csv
import io
from decimal import Decimal

from sqlalchemy.orm import selectinload

from foresy.core.exceptions import DomainValidationError
from foresy.core.result import ServiceResult
from foresy.models import CraEntry, CraEntryMission, User
from foresy.services.base_service import BaseService
from foresy.services.cra_service import active_entries_stmt, line_total, load_cra, sum_entries

UTF8_BOM = "\ufeff"
SUPPORTED_FORMATS = ("csv",)
CSV_HEADERS = ("date", "mission_name", "quantity", "unit_price_eur", "line_total_eur", "description")
UNNAMED_MISSION = "Mission sans nom"


def euros(cents: int | None) -> str:
    return f"{Decimal(int(cents or 0)) / 100:.2f}"


def export_filename(year: int, month: int) -> str:
    return f"cra_{year}_{month:02d}.csv"


class CraExportService(BaseService):
    def export(self, user: User, cra_id: int, export_format: str | None = "csv", include_entries: bool = True) -> ServiceResult:
        def action() -> ServiceResult:
            fmt = (export_format or "").strip().lower()
            if fmt not in SUPPORTED_FORMATS:
                raise DomainValidationError(
                    f"Export format '{fmt}' is not supported. Supported formats: {', '.join(SUPPORTED_FORMATS)}",
                    code="unsupported_format",
                )
            cra = load_cra(self.db, user, cra_id)
            # Read-only: totals come from the entries, the stored CRA is left untouched.
            entries = list(
                self.db.scalars(
                    active_entries_stmt(cra.id)
                    .options(selectinload(CraEntry.mission_link).selectinload(CraEntryMission.mission))
                    .order_by(CraEntry.date, CraEntry.id)
                )
            )
            total_days, total_amount = sum_entries(entries)
            if not include_entries:
                entries = []

            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(CSV_HEADERS)
            for entry in entries:
                mission = entry.mission
                writer.writerow(
                    [
                        entry.date.isoformat(),
                        mission.name if mission is not None else UNNAMED_MISSION,
                        f"{Decimal(entry.quantity):.2f}",
                        euros(entry.unit_price),
                        euros(line_total(entry.quantity, entry.unit_price)),
                        entry.description or "",
                    ]
                )
            writer.writerow(["TOTAL", "", f"{total_days:.2f}", "", euros(total_amount), ""])

            self.logger.info(
                "cra.exported",
                extra={"event": "cra.exported", "cra_id": cra.id, "rows": len(entries), "format": fmt},
            )
            self.metrics.increment("cra.exported", format=fmt)
            return ServiceResult.ok(
                content=UTF8_BOM + buffer.getvalue(),
                filename=export_filename(cra.year, cra.month),
                media_type="text/csv; charset=utf-8",
            )

        return self.run("cra.export", action)
