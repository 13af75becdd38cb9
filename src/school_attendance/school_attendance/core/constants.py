"""Constants and defaults."""

ISO_DATE_FORMAT = "%Y-%m-%d"
EMPTY_SUBJECT_NAME = ""
CSV_ENCODING = "utf-8-sig"
