"""Run the payroll API with uvicorn: ``python -m studio_payroll``."""

import logging

import uvicorn

from studio_payroll.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger(__name__).info(
        "Starting studio payroll API (timezone %s, payment day %d)",
        settings.timezone,
        settings.payment_day,
    )
    uvicorn.run(
        "studio_payroll.api.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
