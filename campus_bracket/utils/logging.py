import logging

from campus_bracket.config import Environment, environment


def create_logger(level: int) -> logging.Logger:
    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(name)s] [%(process)d] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S %z",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    logger = logging.getLogger("campus_bracket")
    logger.setLevel(level)
    logger.addHandler(stream_handler)

    return logger


logger = create_logger(logging.DEBUG if environment is Environment.DEVELOPMENT else logging.INFO)
