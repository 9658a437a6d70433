"""Configuration constants and settings for payroll reconstruction."""
import os
from decimal import ROUND_DOWN, Decimal

# ============================================================================
# RUN CONFIGURATION
# ============================================================================

# Parsed and checked by the command line like an explicit --year
DEFAULT_YEAR = os.getenv("PAYROLL_YEAR", "2015")

DEFAULT_LOG_LEVEL = os.getenv("PAYROLL_LOG_LEVEL", "WARNING").upper()

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ============================================================================
# FILE SYSTEM CONFIGURATION
# ============================================================================

# Semi-annual period: January through June
FIRST_MONTH = 1
LAST_MONTH = 6

# MMDDYYYY, e.g. 01152015
PAYROLL_FILE_PATTERN = (
    r"^(?P<month>0[1-6])(?P<day>0[1-9]|[12][0-9]|3[01])(?P<year>{year})(\.txt)?$"
)

# Department-type letter plus a one or two digit code, e.g. A1, B12
DEPARTMENT_FILE_PATTERN = r"^(?P<prefix>[A-Z])(?P<code>[0-9]{1,2})(\.txt)?$"

# Tolerates a leading byte-order mark
FILE_ENCODING = "utf-8-sig"

# ============================================================================
# RECORD LAYOUT
# ============================================================================

PAYROLL_DELIMITER = ","
PAYROLL_MAX_FIELDS = 3

DEPARTMENT_DELIMITER = ":"
DEPARTMENT_FIELD_COUNT = 5
DEPARTMENT_KEY_SEPARATOR = "-"

RAW_LINE_COLUMNS = ["source_file", "line_number", "raw_line"]

PAYROLL_COLUMNS = [
    "employee_id",
    "hours_worked",
    "ot_hours_worked",
    "raw_line",
]

# ============================================================================
# MONEY
# ============================================================================

CURRENCY_SIGN = "$"
MONEY_QUANTUM = Decimal("0.01")
MONEY_ROUNDING = ROUND_DOWN
ZERO = Decimal("0")

# Upper bound (exclusive) for hours and rates; pay then fits DECIMAL_PRECISION
MAX_AMOUNT = Decimal("1e9")
DECIMAL_PRECISION = 50

# Longest accepted employee ID
MAX_ID_DIGITS = 18

# ============================================================================
# OUTPUT
# ============================================================================

EMPLOYEE_LINE_TEMPLATE = "Employee #{employee_id} ({name}) earned {amount} during the period"

TOTALS_TEMPLATE = (
    "Total employees paid: {employees_paid}\n"
    "Total regular pay: {regular_pay}\n"
    "Total overtime pay: {ot_pay}"
)

# Number of recoverable errors listed in the end-of-run summary
ERROR_SUMMARY_LIMIT = 10
