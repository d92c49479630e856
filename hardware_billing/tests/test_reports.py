import pytest

from hardware_billing.errors import ValidationError
from hardware_billing.models import SalesReportRow
from hardware_billing.services.report_service import format_period_label, summarize

ROWS = [
    {'period': '2024-03-04', 'totalSales': 1000, 'totalProfit': 250, 'billCount': 4,
     'cashSales': 600, 'cashProfit': 150, 'creditSales': 400, 'creditProfit': 100},
    {'period': '2024-03-05', 'totalSales': 500, 'totalProfit': 50, 'billCount': 1,
     'cashSales': 500, 'cashProfit': 50, 'creditSales': 0, 'creditProfit': 0},
]


@pytest.mark.parametrize('period, value, label', [
    ('daily', '2024-03-05', '5 Mar 2024'),
    ('custom', '2024-12-31', '31 Dec 2024'),
    ('weekly', '2024-W09', 'Week 9, 2024'),
    ('monthly', '2024-03', 'March 2024'),
    ('monthly', 'garbage', 'garbage'),
    ('weekly', '2024-09', '2024-09'),
])
def test_period_labels(period, value, label):
    assert format_period_label(period, value) == label


def test_summary():
    summary = summarize([SalesReportRow.from_dict(r) for r in ROWS])
    assert summary['totalSales'] == 1500
    assert summary['totalBills'] == 5
    assert summary['avgBill'] == 300
    assert summary['totalProfit'] == 300
    assert summary['avgProfit'] == 60
    assert summary['profitMargin'] == pytest.approx(20)
    assert summary['cashMargin'] == pytest.approx(200 / 1100 * 100)
    assert summary['creditMargin'] == pytest.approx(25)


def test_empty_summary_has_zero_ratios():
    summary = summarize([])
    assert summary['avgBill'] == 0
    assert summary['profitMargin'] == 0
    assert summary['creditMargin'] == 0


def test_row_profit_margin():
    assert SalesReportRow.from_dict(ROWS[0]).profit_margin == 25
    assert SalesReportRow(period='x').profit_margin == 0


def test_sales_report(container, fake_session):
    fake_session.add('GET', '/reports/sales', ROWS)
    report = container.report_service.get_sales_report('daily', '2024-03-01', '2024-03-31')
    assert report['labels'] == ['4 Mar 2024', '5 Mar 2024']
    assert report['summary']['totalSales'] == 1500
    # dates only apply to custom reports
    assert fake_session.calls[-1]['params'] == {'period': 'daily'}
    assert report['startDate'] is None


def test_custom_sales_report_with_dates(container, fake_session):
    fake_session.add('GET', '/reports/sales', [])
    report = container.report_service.get_sales_report('custom', '2024-03-01', '2024-03-31')
    assert report['startDate'] == '2024-03-01'
    assert fake_session.calls[-1]['params']['endDate'] == '2024-03-31'


def test_invalid_report_input(container, fake_session):
    with pytest.raises(ValidationError):
        container.report_service.get_sales_report('yearly')
    with pytest.raises(ValidationError) as exc:
        container.report_service.get_sales_report('custom', '01/03/2024', '2024-03-31')
    assert exc.value.message == 'Dates must use the YYYY-MM-DD format'
    assert fake_session.calls == []
