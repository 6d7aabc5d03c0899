# logging_setup.py

import logging
from pathlib import Path
from typing import Union


def setup_logging(*, log_dir: Union[str, Path] = "data", level: Union[int, str] = logging.INFO) -> Path:
    """
    Send all logs to <log_dir>/todo.log.

    There is no console handler: the full-screen display owns the terminal
    and any stray write would corrupt the frame. Call this once, before the
    first log call. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "todo.log"

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
