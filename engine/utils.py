# engine/utils.py

import os
import logging
import math

import colorlog

# -------------------------
# Centralized Logging
# -------------------------
logger = logging.getLogger("fog_priority")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

handler = logging.StreamHandler()
handler.setFormatter(colorlog.ColoredFormatter(
    "%(log_color)s[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
    reset=True,
    log_colors={
        'DEBUG':    'cyan',
        'INFO':     'green',
        'WARNING':  'yellow',
        'ERROR':    'red',
        'CRITICAL': 'red,bg_white',
    },
    secondary_log_colors={},
    style='%'
))

# Prevent duplicate handlers if re-imported
if not logger.handlers:
    logger.addHandler(handler)


# -------------------------
# Helper Functions
# -------------------------

def get_logger(name: str):
    """Returns a child logger for a specific engine component."""
    return logger.getChild(name)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """
    Clamp value into [low, high].

    NaN collapses to low.
    """
    if value != value:
        return low
    return max(low, min(high, value))


def is_finite_number(value) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False
