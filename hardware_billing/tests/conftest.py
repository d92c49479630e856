import os
import tempfile

# Logs de los tests fuera del paquete (config se lee al importar)
_TMP = tempfile.mkdtemp(prefix='hardware_billing_tests_')
os.environ.setdefault('BILLING_LOGS_DIR', os.path.join(_TMP, 'logs'))
os.environ.setdefault('BILLING_DATA_DIR', _TMP)

import pytest

from hardware_billing.app_container import AppContainer, get_container
from hardware_billing.models import Customer
from hardware_billing.repositories import PersistenceClient

from .factories import BASE_URL, CUSTOMERS, ITEMS, FakeSession


@pytest.fixture
def fake_session():
    session = FakeSession()
    session.add('GET', '/items', ITEMS)
    session.add('GET', '/customers', CUSTOMERS)
    for customer in CUSTOMERS:
        session.add('GET', f"/customers/{customer['_id']}", customer)
    return session


@pytest.fixture
def api_client(fake_session):
    return PersistenceClient(BASE_URL, token='test-token', timeout=5, session=fake_session)


@pytest.fixture
def container(tmp_path, api_client):
    AppContainer.reset_instance()
    c = get_container(str(tmp_path), api_client)
    yield c
    AppContainer.reset_instance()


@pytest.fixture
def app(container):
    from hardware_billing.main import app as flask_app
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def customer():
    return Customer.from_dict(CUSTOMERS[0])
