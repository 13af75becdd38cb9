# config/logging.py


def build_logging_config(level: str = "INFO", package: str = "school_attendance") -> dict:
    """`package` is the import name the app was loaded under; its loggers get `level`."""

    level = str(level).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "{asctime} {levelname} [{name}:{lineno}] {message}",
                "style": "{",
            },
            "simple": {
                "format": "{levelname} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "detailed",
            },
        },
        "loggers": {
            package: {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "werkzeug": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }
