import logging
import logging.config
import re

_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


class SingleLineFilter(logging.Filter):
    """Keep every log record on one line.

    Merged notes carry blank-line separators; left alone they would split a
    single record across several console lines.
    """

    def _flatten(self, value: object) -> object:
        if not isinstance(value, str):
            return value
        return _LINE_BREAKS.sub(" | ", value.strip())

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._flatten(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(self._flatten(item) for item in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: self._flatten(value) for key, value in record.args.items()}

        return True


def setup_logging() -> None:
    from crosswalk.core.settings import get_settings

    settings = get_settings()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "single_line": {
                    "()": "crosswalk.core.logging.SingleLineFilter",
                }
            },
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["single_line"],
                }
            },
            "loggers": {
                "": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                },
                "openpyxl": {
                    "handlers": ["console"],
                    "level": "WARNING",
                    "propagate": False,
                },
            },
        }
    )
