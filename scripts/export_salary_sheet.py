"""Write the monthly bank salary sheet to CSV.

Usage: python scripts/export_salary_sheet.py 2025 3 [out.csv]
"""

from __future__ import annotations

import csv
import logging
import sys
from pathlib import Path

from _common import load_container

logger = logging.getLogger("export_salary_sheet")


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        raise SystemExit("usage: export_salary_sheet.py YEAR MONTH [OUT.csv]")
    year, month = int(argv[0]), int(argv[1])
    out_file = Path(argv[2]) if len(argv) > 2 else Path(f"salary_sheet_{year}_{month:02d}.csv")

    container = load_container()
    svc = container.bulk_salary_service
    rows = svc.build_sheet(month=month, year=year)

    with out_file.open("w", newline="", encoding="utf-8-sig") as f:
        writer = csv.writer(f)
        writer.writerow(["S.No", "Name", "Account Number", "IFSC", "Amount", "Aadhaar", "Date of Birth"])
        for r in rows:
            writer.writerow(
                [
                    r.serial_no,
                    r.name,
                    r.account_number,
                    r.ifsc_code,
                    f"{r.amount:.2f}",
                    r.aadhaar_number,
                    r.date_of_birth.strftime("%d %b %Y") if r.date_of_birth else "N/A",
                ]
            )
    logger.info("Wrote %d row(s), total %.2f, to %s", len(rows), svc.total_amount(rows), out_file)


if __name__ == "__main__":
    main(sys.argv[1:])
