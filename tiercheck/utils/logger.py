import logging
import os
import sys


def setup_logger(name: str = "tiercheck") -> logging.Logger:
    logger = logging.getLogger(name)
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s [%(name)s:%(funcName)s:%(lineno)d] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger


def short_wallet(wallet: str) -> str:
    """로그용 지갑 주소 축약 (앞 8자)"""
    return f"{wallet[:8]}..." if wallet else "<empty>"


logger = setup_logger()
