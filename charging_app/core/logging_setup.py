import logging

from charging_app.core.config import settings

# Loggers de terceros demasiado ruidosos en INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level_name: str | None = None) -> None:
    """
    Configura el logging raíz a partir de LOG_LEVEL.
    Un nivel desconocido cae a INFO.
    """
    name = (level_name or settings.LOG_LEVEL).upper()
    level = getattr(logging, name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
