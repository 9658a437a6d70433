"""Data models for payroll reconstruction."""
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from typing import List

import pandas as pd

from payroll_recon.utilities import config


def quantize_money(amount: Decimal) -> Decimal:
    """Fix an amount to two decimal places (truncating)."""
    with localcontext() as ctx:
        ctx.prec = config.DECIMAL_PRECISION
        return amount.quantize(config.MONEY_QUANTUM, rounding=config.MONEY_ROUNDING)


@dataclass(frozen=True)
class PayrollRecord:
    """One line of payroll data."""
    employee_id: int
    hours_worked: Decimal
    ot_hours_worked: Decimal
    raw_line: str


@dataclass(frozen=True)
class DepartmentRecord:
    """One line of department master data."""
    employee_id: int
    department_code: str
    employee_name: str
    pay_rate: Decimal
    ot_rate: Decimal


@dataclass(frozen=True)
class EmployeeTotals:
    """Aggregated hours and pay for one employee."""
    employee_id: int
    employee_name: str
    total_hours_worked: Decimal
    total_ot_hours_worked: Decimal
    regular_pay: Decimal
    ot_pay: Decimal
    total_pay: Decimal


@dataclass(frozen=True)
class BatchTotals:
    """Running totals across all employees paid in a run."""
    employees_paid: int = 0
    total_regular_pay: Decimal = config.ZERO
    total_ot_pay: Decimal = config.ZERO

    def add(self, totals: EmployeeTotals) -> "BatchTotals":
        """Return a new accumulator that includes ``totals``."""
        with localcontext() as ctx:
            ctx.prec = config.DECIMAL_PRECISION
            return BatchTotals(
                employees_paid=self.employees_paid + 1,
                total_regular_pay=quantize_money(self.total_regular_pay + totals.regular_pay),
                total_ot_pay=quantize_money(self.total_ot_pay + totals.ot_pay),
            )


@dataclass
class SourceData:
    """Container for raw lines loaded from the input directory."""
    payroll_lines: pd.DataFrame = field(
        default_factory=lambda: pd.DataFrame(columns=config.RAW_LINE_COLUMNS)
    )
    department_lines: pd.DataFrame = field(
        default_factory=lambda: pd.DataFrame(columns=config.RAW_LINE_COLUMNS)
    )
    errors: List[str] = field(default_factory=list)
    payroll_files: int = 0
    department_files: int = 0

    @property
    def files_processed(self) -> int:
        return self.payroll_files + self.department_files


@dataclass
class RunStats:
    """Statistics from one reconstruction run."""
    payroll_files: int = 0
    department_files: int = 0
    payroll_lines: int = 0
    department_lines: int = 0
    malformed_lines: int = 0
    duplicates_removed: int = 0
    unknown_employees: int = 0
    employees_paid: int = 0
    errors: List[str] = field(default_factory=list)
