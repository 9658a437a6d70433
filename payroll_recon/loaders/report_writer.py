"""Output of per-employee pay lines and batch totals."""
import sys
from decimal import Decimal
from typing import Optional, TextIO

from payroll_recon.utilities import config
from payroll_recon.utilities.models import BatchTotals, EmployeeTotals


def format_currency(amount: Decimal) -> str:
    """Format an amount with the currency sign and two decimals."""
    return f"{config.CURRENCY_SIGN}{amount:.2f}"


def format_employee_line(totals: EmployeeTotals) -> str:
    return config.EMPLOYEE_LINE_TEMPLATE.format(
        employee_id=totals.employee_id,
        name=totals.employee_name,
        amount=format_currency(totals.total_pay),
    )


def format_totals_block(batch: BatchTotals) -> str:
    return config.TOTALS_TEMPLATE.format(
        employees_paid=batch.employees_paid,
        regular_pay=format_currency(batch.total_regular_pay),
        ot_pay=format_currency(batch.total_ot_pay),
    )


def write_employee_line(totals: EmployeeTotals, stream: Optional[TextIO] = None) -> None:
    """Write one employee line and flush so it is visible immediately."""
    out = stream or sys.stdout
    out.write(format_employee_line(totals) + "\n")
    out.flush()


def write_totals(batch: BatchTotals, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stdout
    out.write(format_totals_block(batch) + "\n")
    out.flush()
