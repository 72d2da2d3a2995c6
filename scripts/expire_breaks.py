"""Reject pending break requests whose start time has already passed."""

from __future__ import annotations

import logging

from _common import load_container

logger = logging.getLogger("expire_breaks")


def main() -> None:
    container = load_container()
    count = container.break_service.expire_pending()
    logger.info("Rejected %d expired break request(s)", count)


if __name__ == "__main__":
    main()
