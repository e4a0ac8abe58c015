import logging

RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[41m\033[97m",
}
TIME_COLOR = "\033[90m"
LOGGER_COLOR = "\033[35m"
CALLER_COLOR = "\033[94m"
TRACE_COLOR = "\033[95m"
EXTRA_COLOR = "\033[36m"
EXC_COLOR = "\033[91m"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def _quote(value: object) -> str:
    text = str(value).replace("\n", "\\n").replace('"', '\\"')
    return f'"{text}"'


class LogfmtFormatter(logging.Formatter):
    """Colored ``key=value`` lines.

    Fields passed via ``extra=`` are rendered as additional pairs after the
    message, so ``logger.info("stored", extra={"key": k})`` becomes
    ``msg="stored" key="..."``.
    """

    def __init__(self, *args, colors: bool = True, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.colors = colors

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{RESET}" if self.colors else text

    def format(self, record: logging.LogRecord) -> str:
        logfmt = [
            self._paint(TIME_COLOR, f"time={_quote(self.formatTime(record, self.datefmt))}"),
            self._paint(LEVEL_COLORS.get(record.levelname, ""), f"level={record.levelname}"),
            self._paint(LOGGER_COLOR, f"logger={_quote(record.name)}"),
            self._paint(CALLER_COLOR, f"caller={_quote(f'{record.pathname}:{record.lineno}')}"),
        ]

        for attr, key in (("otelTraceID", "trace_id"), ("otelSpanID", "span_id")):
            value = record.__dict__.get(attr)
            if value and value != "0":
                logfmt.append(self._paint(TRACE_COLOR, f"{key}={value}"))

        logfmt.append(f"msg={_quote(record.getMessage())}")

        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("otel"):
                continue
            logfmt.append(self._paint(EXTRA_COLOR, f"{key}={_quote(value)}"))

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            logfmt.append(self._paint(EXC_COLOR, f'exception="{exc_text}"'))

        return " ".join(logfmt)
