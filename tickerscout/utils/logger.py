import logging
import os
from typing import Any, Dict, List

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"

# Shared application logger
logger = logging.getLogger("TickerScout")


def setup_logging(log_cfg: Dict[str, Any]) -> None:
    """Attach handlers from the `logging` section of config.yaml. Console output is the default."""
    handlers: List[logging.Handler] = []
    log_file = log_cfg.get("log_file")
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    if log_cfg.get("use_stream_handler", True) or not handlers:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=str(log_cfg.get("level", "INFO")).upper(),
        format=log_cfg.get("format", DEFAULT_FORMAT),
        handlers=handlers,
    )
