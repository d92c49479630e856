# ==============================================================================
# SERVICIO DE REPORTES DE VENTAS
# ==============================================================================
# El backend agrupa las facturas por período; aquí se calculan los
# indicadores del resumen y las etiquetas legibles de cada período.
#
# Períodos:
#   daily / custom → "2024-03-05"  → "5 Mar 2024"
#   weekly         → "2024-W09"    → "Week 9, 2024"
#   monthly        → "2024-03"     → "March 2024"
# ==============================================================================

from datetime import date
from typing import Any, Dict, List, Optional

from hardware_billing.errors import ValidationError
from hardware_billing.models import ReportPeriod, SalesReportRow
from hardware_billing.performance_logger import profile_function
from hardware_billing.repositories.report_repository import ReportRepository
from hardware_billing.utils import MONTH_NAMES


def _ratio(part: float, whole: float, scale: float = 1.0) -> float:
    return part / whole * scale if whole > 0 else 0.0


def format_period_label(period: str, value: str) -> str:
    """
    Etiqueta legible de un período del reporte.
    Si el valor no tiene el formato esperado se retorna tal cual.
    """
    try:
        if period in (ReportPeriod.DAILY.value, ReportPeriod.CUSTOM.value):
            day = date.fromisoformat(value[:10])
            return f"{day.day} {MONTH_NAMES[day.month - 1][:3]} {day.year}"
        if period == ReportPeriod.WEEKLY.value:
            year, week = value.split('-W')
            return f"Week {int(week)}, {int(year)}"
        if period == ReportPeriod.MONTHLY.value:
            year, month = value.split('-')[:2]
            return f"{MONTH_NAMES[int(month) - 1]} {int(year)}"
    except (ValueError, IndexError):
        return value
    return value


def summarize(rows: List[SalesReportRow]) -> Dict[str, float]:
    """
    Indicadores del resumen (márgenes en %, 0 si el divisor es 0).
    """
    total_sales = sum(r.total_sales for r in rows)
    total_profit = sum(r.total_profit for r in rows)
    total_bills = sum(r.bill_count for r in rows)
    cash_sales = sum(r.cash_sales for r in rows)
    cash_profit = sum(r.cash_profit for r in rows)
    credit_sales = sum(r.credit_sales for r in rows)
    credit_profit = sum(r.credit_profit for r in rows)
    return {
        'totalSales': total_sales,
        'totalBills': total_bills,
        'avgBill': _ratio(total_sales, total_bills),
        'totalProfit': total_profit,
        'avgProfit': _ratio(total_profit, total_bills),
        'profitMargin': _ratio(total_profit, total_sales, 100),
        'cashSales': cash_sales,
        'cashProfit': cash_profit,
        'cashMargin': _ratio(cash_profit, cash_sales, 100),
        'creditSales': credit_sales,
        'creditProfit': credit_profit,
        'creditMargin': _ratio(credit_profit, credit_sales, 100),
    }


class ReportService:
    """Reporte de ventas por período."""

    def __init__(self, report_repo: ReportRepository):
        self.report_repo = report_repo

    @staticmethod
    def _check_date(value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            raise ValidationError('Dates must use the YYYY-MM-DD format')

    @profile_function(name="Reporte de ventas")
    def get_sales_report(
        self,
        period: str = ReportPeriod.DAILY.value,
        start_date: str = None,
        end_date: str = None
    ) -> Dict[str, Any]:
        """
        Args:
            period: daily, weekly, monthly o custom
            start_date / end_date: Solo se usan con custom y si vienen ambas

        Returns:
            {period, rows: [SalesReportRow], labels: [...], summary: {...}}

        Raises:
            ValidationError: Período o fecha inválidos
        """
        try:
            period = ReportPeriod(period).value
        except ValueError:
            raise ValidationError('Invalid report period')

        start = end = None
        if period == ReportPeriod.CUSTOM.value:
            start = self._check_date(start_date)
            end = self._check_date(end_date)
            if not (start and end):
                start = end = None

        rows = self.report_repo.sales_report(period, start, end)
        return {
            'period': period,
            'startDate': start,
            'endDate': end,
            'rows': rows,
            'labels': [format_period_label(period, r.period) for r in rows],
            'summary': summarize(rows),
        }
