"""Business logic for per-employee pay aggregation."""
import logging
from decimal import localcontext
from typing import Dict, Iterator, Sequence

import pandas as pd

from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import UnknownEmployeeError
from payroll_recon.utilities.models import (
    DepartmentRecord,
    EmployeeTotals,
    RunStats,
    quantize_money,
)
from payroll_recon.transformers import rate_resolver

logger = logging.getLogger(__name__)


def aggregate_employee(department: DepartmentRecord, records: pd.DataFrame) -> EmployeeTotals:
    """
    Sum an employee's hours and compute pay.

    Each pay figure is fixed to two decimals before it is used further, so
    total pay is the sum of the two already-truncated amounts.

    Args:
        department: Resolved department record with name and rates
        records: The employee's deduplicated payroll records

    Returns:
        EmployeeTotals
    """
    with localcontext() as ctx:
        ctx.prec = config.DECIMAL_PRECISION
        total_hours = sum(records["hours_worked"], config.ZERO)
        total_ot_hours = sum(records["ot_hours_worked"], config.ZERO)

        regular_pay = quantize_money(department.pay_rate * total_hours)
        ot_pay = quantize_money(department.ot_rate * total_ot_hours)
        total_pay = quantize_money(regular_pay + ot_pay)

    return EmployeeTotals(
        employee_id=department.employee_id,
        employee_name=department.employee_name,
        total_hours_worked=total_hours,
        total_ot_hours_worked=total_ot_hours,
        regular_pay=regular_pay,
        ot_pay=ot_pay,
        total_pay=total_pay,
    )


def process_employees(
    employee_ids: Sequence[int],
    payroll: pd.DataFrame,
    department_index: Dict[int, DepartmentRecord],
    stats: RunStats,
) -> Iterator[EmployeeTotals]:
    """
    Resolve and aggregate each employee in order.

    Employees without a department record are reported in ``stats`` and
    skipped; the rest are yielded one at a time.

    Args:
        employee_ids: Ascending employee IDs from the payroll data
        payroll: Deduplicated payroll frame
        department_index: Department records keyed by employee ID
        stats: Run statistics to update

    Yields:
        EmployeeTotals per known employee
    """
    groups = {int(employee_id): group for employee_id, group in payroll.groupby("employee_id")}

    for employee_id in employee_ids:
        try:
            department = rate_resolver.resolve_rates(employee_id, department_index)
        except UnknownEmployeeError as exc:
            logger.warning("Skipping employee: %s", exc)
            stats.unknown_employees += 1
            stats.errors.append(str(exc))
            continue

        totals = aggregate_employee(department, groups[employee_id])
        logger.debug(
            "Employee #%d: %s h at %s, %s OT h at %s",
            employee_id,
            totals.total_hours_worked,
            department.pay_rate,
            totals.total_ot_hours_worked,
            department.ot_rate,
        )
        stats.employees_paid += 1
        yield totals
