import logging
import sys
from pathlib import Path


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure the root logger with a stderr handler and, optionally, a file handler.

    Call this once, before the server starts.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Drop handlers installed by earlier calls so records are not duplicated.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
