"""Salary arithmetic."""

from __future__ import annotations

from ..core.exceptions import ValidationError


def total_salary(base_salary: float, allowances: float = 0, bonus: float = 0, deductions: float = 0) -> float:
    return base_salary + allowances + bonus - deductions


def pro_rated_salary(
    base_salary: float,
    working_days: int,
    present_days: int,
    allowances: float = 0,
    bonus: float = 0,
    deductions: float = 0,
) -> float:
    """Base salary scaled by present/working days, plus adjustments.

    Raises ValidationError when ``working_days`` is not positive.
    """
    if working_days <= 0:
        raise ValidationError("Working days must be greater than zero")
    daily = base_salary / working_days
    return daily * present_days + allowances + bonus - deductions


def hourly_rate(base_salary: float, monthly_hours: float) -> float:
    if not monthly_hours:
        return 0.0
    return base_salary / monthly_hours
