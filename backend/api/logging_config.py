import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


LOGGER_NAME = "coursepace"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [request_id=%(request_id)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOGS_DIR = Path(__file__).resolve().parents[2] / "logs"


class RequestIdFilter(logging.Filter):
    """Garantit un champ request_id sur chaque record (logs hors requete : "-")."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def configure_logging(logs_dir: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """Logger applicatif : un fichier horodate par demarrage + la console."""

    logs_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"backend_{datetime.now():%Y%m%d_%H%M%S}.log"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    # reload uvicorn / TestClient multiples : pas de handlers empiles
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in (logging.FileHandler(log_path, encoding="utf-8"), logging.StreamHandler()):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        logger.addHandler(handler)

    logger.info("backend_start log_file=%s", log_path)
    return logger
