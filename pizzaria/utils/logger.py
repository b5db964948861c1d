import logging
import sys

from pizzaria.config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configurar_logger(nome: str = "pizzaria", nivel: str = LOG_LEVEL) -> logging.Logger:
    """Cria (uma única vez) o logger principal da aplicação."""
    log = logging.getLogger(nome)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(getattr(logging, nivel, logging.INFO))
    return log


logger = configurar_logger()
