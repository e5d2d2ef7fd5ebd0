import logging
import sys
from pythonjsonlogger import jsonlogger

from app.core.config import LOG_LEVEL


def setup_json_logger():
    #Base logger
    logger = logging.getLogger()
    logger.setLevel(LOG_LEVEL)

    #JSON formatter for structured logs
    json_format = (
        "%(asctime)s %(levelname)s %(name)s %(filename)s %(lineno)d %(funcName)s %(message)s"
    )
    json_formatter = jsonlogger.JsonFormatter(json_format)

    #console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(json_formatter)

    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(console_handler)

    #Reduce noisy libraries
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    logger.info("JSON structured logging initialized")
    return logger
