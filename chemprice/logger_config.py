import logging

import uvicorn

from .config import get_settings

FORMAT = "%(levelprefix)s %(asctime)s [%(threadName)s] [%(name)s] %(message)s"


def get_logger(name: str = __name__) -> logging.Logger:
    logger = logging.getLogger(name)
    level = get_settings().LOG_LEVEL.upper()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = uvicorn.logging.DefaultFormatter(
            FORMAT, datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
