import logging, json, sys, time, os

# per-record context passed via ``extra=``; emitted only when present
CONTEXT_FIELDS = ("op", "path", "session")


def _default_level():
    level = logging.getLevelName(os.getenv("AUTHVAULT_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, name, msg plus any context fields."""

    converter = time.gmtime  # UTC timestamps

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%SZ")

    def format(self, record):
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = str(value)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def get_logger(name="authvault", level=None, to_file=None):
    """Structured JSON logger for all authvault components."""
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else _default_level())

    if not logger.handlers:
        formatter = JsonFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
