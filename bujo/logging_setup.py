from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the Streamlit console readable:
    - allow bujo logs
    - streamlit's own chatter only at WARNING+
    - any other third-party logger only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "bujo" or name.startswith("bujo."):
            return True

        if name.startswith("streamlit"):
            return record.levelno >= logging.WARNING

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/bujo",
    console_level: int | str = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure root logging with:
    - Console handler: filtered for interactive use
    - File handler: full logs for debugging

    Call once per process; Streamlit reruns should go through a cached wrapper.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "bujo.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove handlers we installed earlier to avoid duplicates.
    for h in list(root.handlers):
        if getattr(h, "_bujo_handler", False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    ch._bujo_handler = True  # type: ignore[attr-defined]
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    fh._bujo_handler = True  # type: ignore[attr-defined]
    root.addHandler(fh)

    logging.captureWarnings(True)
    # urllib3 logs every connection at DEBUG; keep the file readable.
    logging.getLogger("urllib3").setLevel(logging.INFO)
    return log_file
