from datetime import date

from hardware_billing import config

from .factories import BILL_ID, CUSTOMERS, FakeResponse, bill_response


def fill_cart(client):
    for _ in range(3):
        r = client.post('/api/cart/add', json={'itemId': 'item1'})
        assert r.status_code == 200
    client.post('/api/cart/adjustments', json={'markup': 10, 'discount': 5})
    r = client.post('/api/cart/customer', json={'customerId': 'cust000001'})
    return r.get_json()['bill']


def test_items_search(client):
    r = client.get('/api/items?q=pipe')
    assert r.status_code == 200
    data = r.get_json()
    assert data['ok'] is True
    assert [i['_id'] for i in data['items']] == ['item1']


def test_cart_totals_in_view(client):
    bill = fill_cart(client)
    assert bill['items'][0]['qty'] == 3
    assert bill['totals']['subtotal'] == '300.00'
    assert bill['totals']['grandTotal'] == '313.50'
    assert bill['totals']['remaining'] == '0.00'


def test_out_of_stock_item(client):
    r = client.post('/api/cart/add', json={'itemId': 'item3'})
    assert r.status_code == 409
    assert r.get_json() == {'ok': False, 'error': 'Item out of stock!'}


def test_errors_do_not_pile_up_in_session(client):
    for _ in range(5):
        client.post('/api/cart/add', json={'itemId': 'item3'})
    with client.session_transaction() as sess:
        assert '_flashes' not in sess


def test_quantity_above_stock_keeps_cart(client):
    client.post('/api/cart/add', json={'itemId': 'item1'})
    r = client.post('/api/cart/quantity', json={'index': 0, 'qty': 9})
    assert r.status_code == 409
    assert client.get('/api/cart').get_json()['bill']['items'][0]['qty'] == 1


def test_checkout_empty_cart(client, fake_session):
    r = client.post('/api/cart/checkout')
    assert r.status_code == 400
    assert r.get_json()['error'] == 'No items in bill!'
    assert fake_session.calls_to('POST', '/bills') == []


def test_checkout_flow(client, fake_session):
    draft = fill_cart(client)
    fake_session.add('POST', '/bills', bill_response())

    r = client.post('/api/cart/checkout')
    assert r.status_code == 200
    data = r.get_json()
    assert data['message'].startswith('Bill #b8c9d0 saved successfully!')
    assert data['bill']['_id'] == BILL_ID
    assert data['receipt'] == f'/receipt/{BILL_ID}'
    assert len(fake_session.calls_to('POST', '/bills')) == 1

    cart = client.get('/api/cart').get_json()['bill']
    assert cart['items'] == []
    assert cart['customer'] is None
    assert cart['draftId'] != draft['draftId']


def test_failed_checkout_keeps_draft(client, fake_session):
    draft = fill_cart(client)
    fake_session.add('POST', '/bills', {'error': 'Insufficient stock for Pipe'}, status=400)

    r = client.post('/api/cart/checkout')
    assert r.status_code == 502
    assert r.get_json()['error'] == 'Insufficient stock for Pipe'

    cart = client.get('/api/cart').get_json()['bill']
    assert cart['draftId'] == draft['draftId']
    assert cart['items'][0]['qty'] == 3


def test_bill_number(client, fake_session):
    fake_session.add('GET', '/bills', [{'_id': 'a'}, {'_id': 'b'}])
    r = client.get('/api/cart/bill-number')
    assert r.get_json()['billNumber'] == f'BILL-{date.today().year}-003'


def test_draft_receipt_page(client, fake_session):
    fake_session.add('GET', '/bills', [])
    fill_cart(client)
    r = client.get('/cart/receipt')
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert config.SHOP_NAME in html
    assert 'Grand Total' in html
    assert 'Rs. 313.50' in html
    assert 'New Customer Balance' in html


def test_stored_bill_receipt_page(client, fake_session):
    fake_session.add('GET', f'/bills/{BILL_ID}', bill_response()['bill'])
    r = client.get(f'/receipt/{BILL_ID}')
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert 'Bill No: b8c9d0' in html
    assert 'Current Customer Balance' in html
    assert 'New Customer Balance' not in html


def test_bills_export(client, fake_session):
    fake_session.add('GET', '/bills', [bill_response()['bill']])
    r = client.get('/bills/export')
    assert r.status_code == 200
    assert r.mimetype == 'text/csv'
    assert 'bill_history.csv' in r.headers['Content-Disposition']
    assert r.get_data(as_text=True).splitlines()[0].startswith('Bill ID,Customer,Date')


def test_bills_export_empty(client, fake_session):
    fake_session.add('GET', '/bills', [])
    r = client.get('/bills/export')
    assert r.status_code == 400
    assert r.get_json()['error'] == 'No bills to export'


def test_transactions_export(client, fake_session):
    fake_session.add('GET', '/transactions', [
        {'_id': 't1', 'customerId': 'cust000001', 'type': 'bill', 'amount': 113.5,
         'description': 'Bill created', 'createdAt': '2024-03-05T10:00:00.000Z'},
    ])
    r = client.get('/customers/cust000001/transactions/export')
    assert r.status_code == 200
    assert 'transactions_ACC-001.csv' in r.headers['Content-Disposition']


def test_payment_requires_customer(client, fake_session):
    r = client.post('/api/payments', json={'amount': 100})
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Please select a customer!'
    assert fake_session.calls == []


def test_payment_returns_refreshed_customer(client, fake_session):
    fake_session.add('POST', '/payments', {'_id': 'tx9'})
    r = client.post('/api/payments', json={'customerId': 'cust000001', 'amount': '25'})
    assert r.status_code == 201
    data = r.get_json()
    assert data['customer']['_id'] == 'cust000001'
    assert fake_session.calls_to('POST', '/payments')[0]['json']['amount'] == 25


def test_payment_saved_even_if_refresh_fails(client, fake_session):
    import requests
    reads = []

    def customer_then_down(params, json):
        reads.append(params)
        if len(reads) > 1:
            raise requests.ConnectionError('refused')
        return FakeResponse(200, CUSTOMERS[0])

    fake_session.add('GET', '/customers/cust000001', handler=customer_then_down)
    fake_session.add('POST', '/payments', {'_id': 'tx9'})

    r = client.post('/api/payments', json={'customerId': 'cust000001', 'amount': '25'})
    assert r.status_code == 201
    assert r.get_json()['customer'] is None
    assert len(fake_session.calls_to('POST', '/payments')) == 1


def test_items_search_by_barcode(client):
    assert client.get('/api/items?q=pvc12').get_json()['items'] == []
    r = client.get('/api/items?q=pvc12&barcode=1')
    assert [i['_id'] for i in r.get_json()['items']] == ['item1']


def test_bills_keyword_search(client, fake_session):
    raw = bill_response()['bill']
    raw['customerId'] = {'_id': 'cust000001', 'name': 'Ali Khan'}
    fake_session.add('GET', '/bills', [raw])

    assert len(client.get('/api/bills?q=ali').get_json()['bills']) == 1
    assert client.get('/api/bills?q=bilal').get_json()['bills'] == []


def test_create_customer_route(client, fake_session):
    r = client.post('/api/customers', json={'name': 'X', 'phone': '12', 'accountNumber': 'A'})
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Phone number must be 10 digits'

    fake_session.add('POST', '/customers', {'_id': 'cust000003', 'name': 'X'})
    r = client.post('/api/customers', json={'name': 'X', 'phone': '0345111222', 'accountNumber': 'A-3'})
    assert r.status_code == 201


def test_sales_report_route(client, fake_session):
    fake_session.add('GET', '/reports/sales', [
        {'period': '2024-03', 'totalSales': 1000, 'totalProfit': 333.333, 'billCount': 3},
    ])
    r = client.get('/api/reports/sales?period=monthly')
    assert r.status_code == 200
    data = r.get_json()
    assert data['rows'][0]['label'] == 'March 2024'
    assert data['rows'][0]['profitMargin'] == 33.33
    assert data['summary']['avgProfit'] == 111.11


def test_activity_route(client):
    assert client.get('/api/activity?limit=abc').status_code == 400
    r = client.get('/api/activity?limit=5')
    assert r.get_json() == {'ok': True, 'logs': []}


def test_backend_down(client, fake_session):
    import requests
    fake_session.add('GET', '/customers', error=requests.ConnectionError('refused'))
    r = client.get('/api/customers')
    assert r.status_code == 502
    assert r.get_json()['error'] == 'Failed to fetch customers'
