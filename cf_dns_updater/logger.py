import logging

logger = logging.getLogger("cf-dns-updater")
logger.setLevel(logging.INFO)

logging_handler = logging.StreamHandler()
logging_formatter = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)
logging_handler.setFormatter(logging_formatter)
logger.addHandler(logging_handler)


def set_logging_level(level: str | int):
    """
    the level is only known once the config is loaded,
    so everything before that is logged at INFO
    """
    logger.setLevel(level)
