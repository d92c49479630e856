# ==============================================================================
# SERVICIO DE EXPORTACIÓN
# ==============================================================================
# CSV con orden de columnas fijo (compatibles con las planillas existentes)
# y el contexto del recibo imprimible (templates/receipt.html).
# ==============================================================================

import csv
import io
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from hardware_billing import config
from hardware_billing.errors import ValidationError
from hardware_billing.models import Bill, BillingState, Customer, SalesReportRow, Transaction
from hardware_billing.services.report_service import format_period_label
from hardware_billing.services.totals_service import apply_adjustments, totals_for
from hardware_billing.utils import format_date_gb, format_money

BILL_COLUMNS = [
    'Bill ID', 'Customer', 'Date', 'Subtotal', 'Markup (%)', 'Discount (%)',
    'Grand Total', 'Partial Payment', 'Remaining Amount', 'Status', 'Payment Type',
]
CUSTOMER_COLUMNS = ['Name', 'Phone', 'Address', 'Account Number', 'Balance']
TRANSACTION_COLUMNS = ['Date', 'Type', 'Description', 'Amount']
SALES_REPORT_COLUMNS = [
    'Period', 'Total Sales (Rs.)', 'Total Profit (Rs.)', 'Profit Margin (%)', 'Bill Count',
    'Cash Sales (Rs.)', 'Cash Profit (Rs.)', 'Credit Sales (Rs.)', 'Credit Profit (Rs.)',
]


def _to_csv(header: List[str], rows: Iterable[List[Any]]) -> str:
    si = io.StringIO()
    writer = csv.writer(si)
    writer.writerow(header)
    for row in rows:
        writer.writerow(row)
    return si.getvalue()


# ==============================================================================
# CSV
# ==============================================================================

def bills_csv(bills: List[Bill]) -> Tuple[str, str]:
    """
    Returns:
        (nombre de archivo, contenido CSV)

    Raises:
        ValidationError: Lista vacía
    """
    if not bills:
        raise ValidationError('No bills to export')
    rows = (
        [
            bill.short_id,
            bill.customer_name or 'N/A',
            format_date_gb(bill.created_at),
            format_money(bill.subtotal),
            format_money(bill.markup),
            format_money(bill.discount),
            format_money(bill.grand_total),
            format_money(bill.partial_payment),
            format_money(bill.remaining),
            bill.status.value,
            bill.payment_type.value,
        ]
        for bill in bills
    )
    return 'bill_history.csv', _to_csv(BILL_COLUMNS, rows)


def customers_csv(customers: List[Customer]) -> Tuple[str, str]:
    rows = (
        [c.name, c.phone, c.address, c.account_number, format_money(c.balance)]
        for c in customers
    )
    return 'customers.csv', _to_csv(CUSTOMER_COLUMNS, rows)


def transactions_csv(customer: Customer, transactions: List[Transaction]) -> Tuple[str, str]:
    """
    Raises:
        ValidationError: Lista vacía
    """
    if not transactions:
        raise ValidationError('No transactions to export')
    rows = (
        [
            format_date_gb(t.created_at),
            t.type,
            t.description or 'Manual payment',
            format_money(t.amount),
        ]
        for t in transactions
    )
    return f'transactions_{customer.account_number}.csv', _to_csv(TRANSACTION_COLUMNS, rows)


def sales_report_csv(period: str, rows: List[SalesReportRow], today: date = None) -> Tuple[str, str]:
    today = today or date.today()
    lines = (
        [
            format_period_label(period, r.period),
            format_money(r.total_sales),
            format_money(r.total_profit),
            format_money(r.profit_margin),
            r.bill_count,
            format_money(r.cash_sales),
            format_money(r.cash_profit),
            format_money(r.credit_sales),
            format_money(r.credit_profit),
        ]
        for r in rows
    )
    return f'sales_report_{period}_{today.isoformat()}.csv', _to_csv(SALES_REPORT_COLUMNS, lines)


# ==============================================================================
# RECIBO
# ==============================================================================

def _shop() -> Dict[str, str]:
    return {
        'name': config.SHOP_NAME,
        'address': config.SHOP_ADDRESS,
        'phone': config.SHOP_PHONE,
        'currency': config.CURRENCY_SYMBOL,
    }


def _pct(value: float) -> str:
    """10.0 → '10', 12.5 → '12.5'"""
    return f"{value:g}"


def draft_receipt(state: BillingState, bill_number: str) -> Dict[str, Any]:
    """
    Contexto del recibo para el borrador en curso.

    Args:
        state: Borrador de la sesión
        bill_number: Número sugerido (BILL-2024-001)
    """
    totals = totals_for(state)
    customer = state.customer
    return {
        'shop': _shop(),
        'bill_number': bill_number,
        'customer_name': customer.name if customer else 'N/A',
        'date': format_date_gb(state.bill_date),
        'lines': [
            {
                'label': line.label(),
                'qty': line.quantity,
                'price': format_money(line.price),
                'total': format_money(line.total),
            }
            for line in state.cart
        ],
        'subtotal': format_money(totals.subtotal),
        'markup_pct': _pct(state.markup),
        'markup': format_money(totals.markup_amount),
        'discount_pct': _pct(state.discount),
        'discount': format_money(totals.discount_amount),
        'grand_total': format_money(totals.grand_total),
        'paid': format_money(totals.paid),
        'remaining': format_money(totals.remaining),
        'has_customer': customer is not None,
        'current_balance': format_money(customer.balance) if customer else None,
        'new_balance': format_money(totals.projected_new_balance) if customer else None,
    }


def bill_receipt(bill: Bill, customer: Optional[Customer] = None) -> Dict[str, Any]:
    """
    Contexto del recibo de una factura guardada.

    Los montos de recargo y descuento se recalculan con el mismo orden
    (recargo y después descuento) a partir del subtotal guardado.
    """
    markup_amount, _, discount_amount, _ = apply_adjustments(bill.subtotal, bill.markup, bill.discount)
    return {
        'shop': _shop(),
        'bill_number': bill.short_id,
        'customer_name': bill.customer_name or (customer.name if customer else 'N/A'),
        'date': format_date_gb(bill.created_at),
        'lines': [
            {
                'label': line.label() or line.item_id,
                'qty': line.quantity,
                'price': format_money(line.price),
                'total': format_money(line.total),
            }
            for line in bill.items
        ],
        'subtotal': format_money(bill.subtotal),
        'markup_pct': _pct(bill.markup),
        'markup': format_money(markup_amount),
        'discount_pct': _pct(bill.discount),
        'discount': format_money(discount_amount),
        'grand_total': format_money(bill.grand_total),
        'paid': format_money(bill.partial_payment),
        'remaining': format_money(bill.remaining),
        'has_customer': customer is not None,
        'current_balance': format_money(customer.balance) if customer else None,
        'new_balance': None,
    }
