import pytest
import requests

from hardware_billing.errors import InvalidResponseError, TransportError
from hardware_billing.repositories import (
    CustomerRepository,
    ItemRepository,
    PersistenceClient,
    ReportRepository,
    TransactionRepository,
)

from .factories import BASE_URL, FakeSession


@pytest.fixture
def backend():
    return FakeSession()


@pytest.fixture
def api(backend):
    return PersistenceClient(BASE_URL + '/', token='secret', timeout=3, session=backend)


def test_get_returns_decoded_json(api, backend):
    backend.add('GET', '/items', [{'_id': 'item1'}])
    assert api.get('/items', 'Failed to fetch items') == [{'_id': 'item1'}]

    call = backend.calls[0]
    assert call['headers']['Authorization'] == 'Bearer secret'
    assert call['timeout'] == 3


def test_no_token_no_authorization_header(backend):
    api = PersistenceClient(BASE_URL, session=backend)
    backend.add('GET', '/items', [])
    api.get('/items', 'Failed to fetch items')
    assert 'Authorization' not in backend.calls[0]['headers']


def test_network_failure_uses_default_message(api, backend):
    backend.add('POST', '/bills', error=requests.ConnectionError('refused'))
    with pytest.raises(TransportError) as exc:
        api.post('/bills', {}, 'Failed to save bill')
    assert exc.value.message == 'Failed to save bill'
    assert exc.value.status_code is None


def test_backend_error_message_is_surfaced(api, backend):
    backend.add('GET', '/customers/x', {'error': 'Customer not found'}, status=404)
    with pytest.raises(TransportError) as exc:
        api.get('/customers/x', 'Failed to fetch customer details')
    assert exc.value.message == 'Customer not found'
    assert exc.value.status_code == 404


def test_unreadable_error_body_uses_default(api, backend):
    backend.add('DELETE', '/items/1', raw='Internal Server Error', status=500)
    with pytest.raises(TransportError) as exc:
        api.delete('/items/1', 'Failed to delete item')
    assert exc.value.message == 'Failed to delete item'


def test_unreadable_success_body(api, backend):
    backend.add('GET', '/items', raw='<html></html>')
    with pytest.raises(InvalidResponseError):
        api.get('/items', 'Failed to fetch items')


def test_empty_body_is_none(api, backend):
    backend.add('DELETE', '/customers/1', status=204)
    assert api.delete('/customers/1', 'Failed to delete customer') is None


def test_repository_checks_response_shape(api, backend):
    backend.add('GET', '/items', {'items': []})
    with pytest.raises(InvalidResponseError) as exc:
        ItemRepository(api).list_items()
    assert exc.value.message == 'Failed to fetch items'


def test_customer_repository_parses_records(api, backend):
    backend.add('GET', '/customers', [
        {'_id': 'c1', 'name': 'Ali', 'phone': 300123456, 'accountNumber': 'A-1'},
        'garbage',
    ])
    customers = CustomerRepository(api).list_customers()
    assert len(customers) == 1
    assert customers[0].phone == '300123456'
    assert customers[0].balance == 0


def test_transactions_are_filtered_by_customer(api, backend):
    backend.add('GET', '/transactions', [
        {'_id': 't1', 'customerId': 'c1', 'type': 'payment', 'amount': -100},
    ])
    transactions = TransactionRepository(api).list_for_customer('c1')
    assert transactions[0].amount == -100
    assert backend.calls[0]['params'] == {'customerId': 'c1'}


def test_report_dates_sent_only_in_pairs(api, backend):
    backend.add('GET', '/reports/sales', [])
    repo = ReportRepository(api)

    repo.sales_report('custom', '2024-03-01', '2024-03-31')
    assert backend.calls[-1]['params'] == {
        'period': 'custom', 'startDate': '2024-03-01', 'endDate': '2024-03-31'
    }

    repo.sales_report('custom', '2024-03-01', None)
    assert backend.calls[-1]['params'] == {'period': 'custom'}


def test_report_failure_message(api, backend):
    backend.add('GET', '/reports/sales', {}, status=500)
    with pytest.raises(TransportError) as exc:
        ReportRepository(api).sales_report('daily')
    assert exc.value.message == 'Failed to fetch sales reports. Please try again.'


def test_repositories_satisfy_protocols(api, tmp_path):
    from hardware_billing.repositories import (
        ActivityRepository,
        BillRepository,
        IActivityRepository,
        IBillRepository,
        ICustomerRepository,
        IItemRepository,
        IReportRepository,
        ITransactionRepository,
    )
    assert isinstance(ItemRepository(api), IItemRepository)
    assert isinstance(CustomerRepository(api), ICustomerRepository)
    assert isinstance(BillRepository(api), IBillRepository)
    assert isinstance(TransactionRepository(api), ITransactionRepository)
    assert isinstance(ReportRepository(api), IReportRepository)
    assert isinstance(ActivityRepository(str(tmp_path)), IActivityRepository)
