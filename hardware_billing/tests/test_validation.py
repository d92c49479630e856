import pytest

from hardware_billing.errors import ValidationError
from hardware_billing.services.validation import coerce_item, validate_customer, validate_item


def customer_form(**overrides):
    data = {'name': 'Ali Khan', 'phone': '0300123456', 'accountNumber': 'ACC-001', 'address': ' Mardan '}
    data.update(overrides)
    return data


def item_form(**overrides):
    data = {'name': 'Pipe', 'type': 'PVC', 'size': '1/2', 'barcode': 'PVC12',
            'costPrice': '60', 'sellingPrice': '100', 'taxRate': '0', 'stock': '5'}
    data.update(overrides)
    return data


def test_valid_customer_is_trimmed():
    assert validate_customer(customer_form()) == {
        'name': 'Ali Khan',
        'phone': '0300123456',
        'address': 'Mardan',
        'accountNumber': 'ACC-001',
    }


@pytest.mark.parametrize('field', ['name', 'phone', 'accountNumber'])
def test_customer_required_fields(field):
    with pytest.raises(ValidationError) as exc:
        validate_customer(customer_form(**{field: '  '}))
    assert exc.value.message == 'Name, phone, and account number are required'


@pytest.mark.parametrize('phone', [
    '030012345', '03001234567', '0300-12345', 'abcdefghij',
    '\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669\u0660',
])
def test_customer_phone_must_be_ten_digits(phone):
    with pytest.raises(ValidationError) as exc:
        validate_customer(customer_form(phone=phone))
    assert exc.value.message == 'Phone number must be 10 digits'


@pytest.mark.parametrize('account', ['ACC 001', 'ACC_001', 'ACC#1'])
def test_customer_account_number_format(account):
    with pytest.raises(ValidationError) as exc:
        validate_customer(customer_form(accountNumber=account))
    assert exc.value.message == 'Account number must be alphanumeric with dashes'


def test_valid_item_numbers_are_converted():
    item = validate_item(item_form())
    assert item['costPrice'] == 60.0
    assert item['sellingPrice'] == 100.0
    assert item['stock'] == 5


def test_blank_item_numbers_default_to_zero():
    item = coerce_item({'name': 'Pipe', 'costPrice': '', 'sellingPrice': None, 'stock': 'x'})
    assert item['costPrice'] == 0
    assert item['sellingPrice'] == 0
    assert item['taxRate'] == 0
    assert item['stock'] == 0


@pytest.mark.parametrize('overrides, message', [
    ({'name': ''}, 'Name is required'),
    ({'costPrice': '-1'}, 'Cost price cannot be negative'),
    ({'sellingPrice': '-0.5'}, 'Selling price cannot be negative'),
    ({'taxRate': '101'}, 'Tax rate must be between 0 and 100'),
    ({'stock': '-3'}, 'Stock cannot be negative'),
    ({'barcode': 'PVC-12'}, 'Barcode must be alphanumeric'),
])
def test_invalid_item(overrides, message):
    with pytest.raises(ValidationError) as exc:
        validate_item(item_form(**overrides))
    assert exc.value.message == message


def test_barcode_is_optional():
    assert validate_item(item_form(barcode=''))['barcode'] == ''
