# ==============================================================================
# REPOSITORIO DE REPORTES
# ==============================================================================
# GET /reports/sales?period=daily|weekly|monthly|custom[&startDate&endDate]
# ==============================================================================

from typing import List, Optional

from hardware_billing.models import SalesReportRow
from hardware_billing.repositories.api_client import RemoteRepository


class ReportRepository(RemoteRepository):
    """Acceso a los reportes agregados del backend."""

    def sales_report(
        self,
        period: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[SalesReportRow]:
        """
        Args:
            period: daily, weekly, monthly o custom
            start_date: YYYY-MM-DD (solo se envía junto con end_date)
            end_date: YYYY-MM-DD
        """
        error = 'Failed to fetch sales reports. Please try again.'
        params = {'period': period}
        if start_date and end_date:
            params['startDate'] = start_date
            params['endDate'] = end_date
        data = self._expect_list(self.client.get('/reports/sales', error, params=params), error)
        return [SalesReportRow.from_dict(d) for d in data if isinstance(d, dict)]
