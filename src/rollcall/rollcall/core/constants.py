"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import CallAction

API_PREFIX = "/api"

DEFAULT_RANDOM_EVENT_PROBABILITY = 0.2
BONUS_MULTIPLIER = 2
SCORE_QUANTUM = Decimal("0.01")
# Largest magnitude a DECIMAL(10,2) column holds.
MAX_SCORE = Decimal("99999999.99")

DEFAULT_SCORE_RULES = {
    CallAction.ARRIVE.value: 1,
    CallAction.ABSENT.value: -1,
    CallAction.REPEAT_CORRECT.value: 0.5,
    CallAction.REPEAT_WRONG.value: -1,
    CallAction.ANSWER_EXCELLENT.value: 3,
    CallAction.ANSWER_GOOD.value: 2,
    CallAction.ANSWER_AVERAGE.value: 1,
    CallAction.ANSWER_POOR.value: 0.5,
}

RECENT_CALLS_LIMIT = 10
SCORE_RANK_LIMIT = 10

DEFAULT_POOL_SIZE = 20
# mysql-connector refuses pools larger than this.
MAX_POOL_SIZE = 32

IMPORT_COLUMNS = ("Student ID", "Name", "Major")
EXPORT_COLUMNS = (
    ("student_id", "Student ID", 15),
    ("name", "Name", 10),
    ("major", "Major", 20),
    ("current_score", "Current Score", 12),
    ("total_calls", "Total Calls", 10),
    ("arrived_calls", "Arrived Calls", 12),
    ("correct_answers", "Correct Answers", 14),
    ("transfer_rights", "Transfer Rights", 14),
)
EXPORT_SHEET_NAME = "Students"
EXPORT_FILE_NAME = "students.xlsx"
EXPORT_HEADER_FILL = "E6E6FA"
ALLOWED_IMPORT_EXTENSIONS = (".xlsx",)
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
