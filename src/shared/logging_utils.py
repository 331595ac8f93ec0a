import logging
from typing import Any, Dict, Optional


_LOGGER = logging.getLogger("statcard")


def log(level: int, request_id: Optional[str], message: str, exc_info: bool = False, **dimensions: Any) -> None:
    dims: Dict[str, Any] = {"requestId": request_id} if request_id else {}
    dims.update(dimensions)
    try:
        _LOGGER.log(level, message, exc_info=exc_info, extra={"custom_dimensions": dims})
    except Exception:
        # Fallback if extra/custom_dimensions not supported in the environment
        _LOGGER.log(level, f"{message} | {dims}", exc_info=exc_info)


def debug(request_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.DEBUG, request_id, message, **dimensions)


def info(request_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.INFO, request_id, message, **dimensions)


def warning(request_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.WARNING, request_id, message, **dimensions)


def error(request_id: Optional[str], message: str, exc_info: bool = False, **dimensions: Any) -> None:
    log(logging.ERROR, request_id, message, exc_info=exc_info, **dimensions)
