import logging

from stageflow.config import config


def create_logger(level: int | str) -> logging.Logger:
    logger = logging.getLogger("stageflow")
    logger.setLevel(level)

    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s")
        )
        logger.addHandler(stream_handler)

    return logger


logger = create_logger(config.log_level.upper())
