from .console_reporter import (
    format_check_line,
    report_pending,
    report_summary,
    report_unpinned,
    report_update,
)
from .json_reporter import report_json

__all__ = [
    "format_check_line",
    "report_pending",
    "report_summary",
    "report_unpinned",
    "report_update",
    "report_json",
]
