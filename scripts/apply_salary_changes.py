"""Apply salary changes whose effective date has arrived.

Meant to run daily from cron; the backend procedure is idempotent.
"""

from __future__ import annotations

import logging

from _common import load_container

logger = logging.getLogger("apply_salary_changes")


def main() -> None:
    container = load_container()
    result = container.salary_change_service.apply_pending()
    logger.info("Done: %s", result)


if __name__ == "__main__":
    main()
