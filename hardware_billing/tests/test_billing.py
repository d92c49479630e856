from datetime import date

import pytest

from hardware_billing.errors import (
    DuplicateRequestError,
    EmptyCartError,
    InvalidResponseError,
    NoCustomerError,
    OverpaymentError,
    TransportError,
    ValidationError,
)
from hardware_billing.models import Bill, BillingState, BillStatus, PaymentMethod, Transaction
from hardware_billing.services.billing_service import build_bill, build_bill_payload, checkout_message

from .factories import BILL_ID, bill_response, make_cart


def credit_state(customer, amount_paid='200'):
    return BillingState(
        cart=make_cart(),
        customer=customer,
        markup=10,
        discount=5,
        payment_method=PaymentMethod.CREDIT,
        amount_paid=amount_paid,
    )


def cash_state(customer):
    return BillingState(cart=make_cart(), customer=customer, markup=10, discount=5)


# ---------------------------------------------------------------------------
# validation before any backend call
# ---------------------------------------------------------------------------

def test_empty_cart_is_rejected_first(container, fake_session):
    with pytest.raises(EmptyCartError) as exc:
        container.billing_service.checkout(BillingState())
    assert exc.value.message == 'No items in bill!'
    assert fake_session.calls == []


def test_customer_is_required(container, fake_session):
    with pytest.raises(NoCustomerError) as exc:
        container.billing_service.checkout(BillingState(cart=make_cart()))
    assert exc.value.message == 'Please select a customer!'
    assert fake_session.calls == []


def test_credit_overpayment_is_rejected(container, fake_session, customer):
    with pytest.raises(OverpaymentError):
        container.billing_service.checkout(credit_state(customer, '313.51'))
    assert fake_session.calls_to('POST', '/bills') == []


def test_paying_exact_total_on_credit_completes_bill(customer):
    bill = build_bill(credit_state(customer, '313.50'))
    assert bill.status == BillStatus.COMPLETED
    assert bill.remaining == 0


def test_negative_credit_payment_is_rejected(container, fake_session, customer):
    with pytest.raises(ValidationError) as exc:
        container.billing_service.checkout(credit_state(customer, '-100'))
    assert exc.value.message == 'Amount paid cannot be negative!'
    assert fake_session.calls_to('POST', '/bills') == []


def test_overpayment_is_checked_before_rounding(customer):
    with pytest.raises(OverpaymentError):
        build_bill(credit_state(customer, '313.504'))


# ---------------------------------------------------------------------------
# bill payload
# ---------------------------------------------------------------------------

def test_cash_payload(customer):
    payload = build_bill_payload(cash_state(customer))
    assert payload == {
        'customerId': 'cust000001',
        'items': [{
            'itemId': 'item1',
            'quantity': 3,
            'unitPrice': 100.0,
            'customPrice': 100.0,
            'unitCost': 60.0,
            'total': 300.0,
            'totalCost': 180.0,
        }],
        'subtotal': 300.0,
        'markup': 10,
        'discount': 5,
        'grandTotal': 313.5,
        'paymentType': 'cash',
        'partialPayment': 313.5,
        'status': 'completed',
    }


def test_credit_payload_is_pending(customer):
    payload = build_bill_payload(credit_state(customer))
    assert payload['paymentType'] == 'credit'
    assert payload['partialPayment'] == 200
    assert payload['status'] == 'pending'


def test_money_is_rounded_at_persistence(customer):
    state = BillingState(cart=make_cart(qty=1, unit_price=10), customer=customer, markup=33.333)
    payload = build_bill_payload(state)
    assert payload['grandTotal'] == 13.33


def test_payload_matches_stored_bill(customer):
    payload = build_bill_payload(credit_state(customer))
    assert Bill.from_dict(payload).to_payload() == payload


def test_checkout_message():
    bill = Bill.from_dict(bill_response()['bill'])
    transactions = [
        Transaction.from_dict({'type': 'bill', 'amount': 313.5, 'description': 'Bill created'}),
        Transaction.from_dict({'type': 'payment', 'amount': -200, 'description': 'Partial payment'}),
    ]
    assert checkout_message(bill, transactions) == (
        'Bill #b8c9d0 saved successfully! Transactions: '
        'bill: Rs. 313.50 (Bill created), payment: Rs. 200.00 (Partial payment)'
    )


# ---------------------------------------------------------------------------
# checkout against the backend
# ---------------------------------------------------------------------------

def test_checkout_posts_once_and_resets_draft(container, fake_session, customer):
    fake_session.add('POST', '/bills', bill_response(313.5, 200, 'pending'))
    fake_session.add('GET', '/customers/cust000001', dict(customer.to_dict(), balance=163.5))
    state = credit_state(customer)

    result = container.billing_service.checkout(state)

    posts = fake_session.calls_to('POST', '/bills')
    assert len(posts) == 1
    assert posts[0]['json'] == build_bill_payload(state)

    assert result.bill.id == BILL_ID
    assert result.bill.customer_name == 'Ali Khan'
    assert result.customer.balance == 163.5
    assert result.message.startswith('Bill #b8c9d0 saved successfully!')
    assert result.state.cart.is_empty
    assert result.state.customer is None
    assert result.state.draft_id != state.draft_id
    # the submitted draft is untouched
    assert len(state.cart) == 1

    # stock snapshot reloaded after the bill
    assert fake_session.calls_to('GET', '/items')

    logs = container.activity_service.get_recent(log_type='BILL')
    assert logs[0]['related_id'] == BILL_ID


@pytest.mark.parametrize('body', [
    {'bill': {}, 'transactions': []},
    {'bill': {'_id': BILL_ID}},
    {'transactions': []},
    ['not', 'a', 'dict'],
])
def test_checkout_rejects_malformed_response(container, fake_session, customer, body):
    fake_session.add('POST', '/bills', body)
    with pytest.raises(InvalidResponseError) as exc:
        container.billing_service.checkout(cash_state(customer))
    assert exc.value.message == 'Invalid bill response from server'


def test_checkout_backend_error_keeps_message(container, fake_session, customer):
    fake_session.add('POST', '/bills', {'error': 'Insufficient stock for Pipe'}, status=400)
    with pytest.raises(TransportError) as exc:
        container.billing_service.checkout(cash_state(customer))
    assert exc.value.message == 'Insufficient stock for Pipe'
    assert exc.value.status_code == 400

    failed = container.activity_service.get_recent(log_type='BILL')
    assert 'Checkout failed' in failed[0]['message']


def test_checkout_backend_error_default_message(container, fake_session, customer):
    fake_session.add('POST', '/bills', raw='<html>boom</html>', status=500)
    with pytest.raises(TransportError) as exc:
        container.billing_service.checkout(cash_state(customer))
    assert exc.value.message == 'Failed to save bill'


def test_checkout_guard_blocks_duplicate(container, fake_session, customer):
    state = cash_state(customer)
    container.registry.acquire(f'checkout:{state.draft_id}')
    with pytest.raises(DuplicateRequestError):
        container.billing_service.checkout(state)
    assert fake_session.calls_to('POST', '/bills') == []


def test_checkout_guard_released_after_failure(container, fake_session, customer):
    state = cash_state(customer)
    fake_session.add('POST', '/bills', {'error': 'down'}, status=503)
    with pytest.raises(TransportError):
        container.billing_service.checkout(state)
    assert not container.registry.is_pending(f'checkout:{state.draft_id}')


def test_checkout_survives_failed_customer_refresh(container, fake_session, customer):
    fake_session.add('POST', '/bills', bill_response())
    fake_session.add('GET', '/customers/cust000001', {'error': 'down'}, status=500)

    result = container.billing_service.checkout(cash_state(customer))

    assert result.bill.id == BILL_ID
    assert result.customer is None
    warnings = container.activity_service.get_recent(log_type='SYSTEM')
    assert warnings


def test_checkout_survives_activity_log_failure(container, fake_session, customer, monkeypatch):
    def disk_full(*args, **kwargs):
        raise OSError('No space left on device')

    monkeypatch.setattr(container.activity_service.activity_repo, 'log', disk_full)
    fake_session.add('POST', '/bills', bill_response())

    result = container.billing_service.checkout(cash_state(customer))
    assert result.bill.id == BILL_ID
    assert len(fake_session.calls_to('POST', '/bills')) == 1


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------

def test_next_bill_number(container, fake_session):
    fake_session.add('GET', '/bills', [{'_id': str(i)} for i in range(4)])
    number = container.billing_service.next_bill_number(today=date(2024, 3, 5))
    assert number == 'BILL-2024-005'


def test_list_bills_filters(container, fake_session):
    fake_session.add('GET', '/bills', [bill_response()['bill']])

    bills = container.billing_service.list_bills('all')
    assert bills[0].id == BILL_ID
    assert fake_session.calls_to('GET', '/bills')[-1]['params'] is None

    container.billing_service.list_bills('pending')
    assert fake_session.calls_to('GET', '/bills')[-1]['params'] == {'status': 'pending'}

    with pytest.raises(ValidationError):
        container.billing_service.list_bills('paid')


def test_list_bills_keyword_search(container, fake_session):
    ali = bill_response()['bill']
    ali['customerId'] = {'_id': 'cust000001', 'name': 'Ali Khan'}
    bilal = dict(
        bill_response()['bill'],
        _id='65f0a1b2c3d4e5f6a7ffff01',
        customerId={'_id': 'cust000002', 'name': 'Bilal Ahmed'},
        createdAt='2024-04-10T09:00:00.000Z',
    )
    fake_session.add('GET', '/bills', [ali, bilal])
    search = container.billing_service.list_bills

    assert [b.id for b in search('all', 'ali')] == [BILL_ID]
    assert [b.id for b in search('all', '5 mar 2024')] == [BILL_ID]
    assert [b.id for b in search('all', 'ffff01 apr')] == ['65f0a1b2c3d4e5f6a7ffff01']
    assert search('all', 'bilal mar') == []
    assert len(search('all', '  ')) == 2


def test_bill_with_populated_customer(container, fake_session):
    raw = bill_response()['bill']
    raw['customerId'] = {'_id': 'cust000001', 'name': 'Ali Khan'}
    fake_session.add('GET', f'/bills/{BILL_ID}', raw)

    bill = container.billing_service.get_bill(BILL_ID)
    assert bill.customer_id == 'cust000001'
    assert bill.customer_name == 'Ali Khan'
    assert bill.short_id == 'b8c9d0'
