from flask import Flask, Response, render_template, request

from hardware_billing import config

# Sistema de profiling interno
from hardware_billing.performance_logger import init_profiling

from hardware_billing.errors import BillingError, ValidationError
from hardware_billing.services import export_service

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo leen la petición, llaman a un servicio y devuelven JSON.
# Toda la lógica de negocio vive en services/.
# ═══════════════════════════════════════════════════════════════════════════
from hardware_billing.app_container import get_container

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# INICIALIZAR SISTEMA DE PROFILING
# ═══════════════════════════════════════════════════════════════════════════
# Mide rendimiento de rutas y llamadas al backend. Logs en logs/
init_profiling(app)

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
# El borrador de factura vive en la sesión (cookie firmada).
# Comando: export BILLING_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
if config.PRODUCTION_MODE and not config.SECRET_KEY:
    print("[ADVERTENCIA] PRODUCTION_MODE activo sin BILLING_SECRET_KEY definida")
    print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

app.secret_key = config.SECRET_KEY or config.DEFAULT_SECRET

app.config.update(
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SECURE=False,       # False para HTTP local (True solo para HTTPS)
    SESSION_COOKIE_SAMESITE='Lax',
    PERMANENT_SESSION_LIFETIME=86400,  # 24 horas
)

if not config.PRODUCTION_MODE:
    print(f"[API] Servicio de persistencia: {config.API_BASE_URL}")


def container():
    return get_container()


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Datos no recibidos o formato inválido')
    return data


def _csv_response(filename, content):
    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment;filename={filename}'}
    )


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════
# Cualquier BillingError se convierte en {"ok": false, "error": "..."} con
# el código HTTP de su clase. La aplicación sigue respondiendo.

@app.errorhandler(BillingError)
def handle_billing_error(exc):
    return exc.to_dict(), exc.http_status


# ═══════════════════════════════════════════════════════════════════════════
# ITEMS
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/api/items', methods=['GET'])
def api_items():
    """
    Lista (o busca) items del snapshot.
    ?q=palabras  ?barcode=1 busca también en el código de barras
    ?refresh=1 fuerza recarga desde el backend
    """
    inventory = container().inventory_service
    if request.args.get('refresh') == '1':
        inventory.reload()
    items = inventory.search(
        request.args.get('q', ''),
        with_barcode=request.args.get('barcode') == '1'
    )
    return {'ok': True, 'items': [item.to_dict() for item in items]}


@app.route('/api/items', methods=['POST'])
def api_items_create():
    created = container().inventory_service.create_item(_json_body())
    return {'ok': True, 'item': created, 'message': 'Item added successfully'}, 201


@app.route('/api/items/<item_id>', methods=['PUT'])
def api_items_update(item_id):
    updated = container().inventory_service.update_item(item_id, _json_body())
    return {'ok': True, 'item': updated, 'message': 'Item updated successfully'}


@app.route('/api/items/<item_id>', methods=['DELETE'])
def api_items_delete(item_id):
    container().inventory_service.delete_item(item_id)
    return {'ok': True, 'message': 'Item deleted successfully'}


# ═══════════════════════════════════════════════════════════════════════════
# CLIENTES
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/api/customers', methods=['GET'])
def api_customers():
    """Lista de clientes; con ?q= devuelve solo las coincidencias."""
    customers_service = container().customer_service
    if 'q' in request.args:
        customers = customers_service.search(request.args.get('q', ''))
    else:
        customers = customers_service.list_customers()
    return {'ok': True, 'customers': [c.to_dict() for c in customers]}


@app.route('/api/customers', methods=['POST'])
def api_customers_create():
    customer = container().customer_service.create_customer(_json_body())
    return {
        'ok': True,
        'customer': customer.to_dict() if customer else None,
        'message': 'Customer added successfully'
    }, 201


@app.route('/api/customers/<customer_id>', methods=['PUT'])
def api_customers_update(customer_id):
    customer = container().customer_service.update_customer(customer_id, _json_body())
    return {
        'ok': True,
        'customer': customer.to_dict() if customer else None,
        'message': 'Customer updated successfully'
    }


@app.route('/api/customers/<customer_id>', methods=['DELETE'])
def api_customers_delete(customer_id):
    container().customer_service.delete_customer(customer_id)
    return {'ok': True, 'message': 'Customer deleted successfully'}


@app.route('/api/customers/<customer_id>/transactions', methods=['GET'])
def api_customer_transactions(customer_id):
    service = container().customer_service
    customer = service.get_customer(customer_id)
    transactions = service.list_transactions(customer_id)
    return {
        'ok': True,
        'customer': customer.to_dict(),
        'transactions': [t.to_dict() for t in transactions]
    }


# ═══════════════════════════════════════════════════════════════════════════
# FACTURA EN CURSO (borrador en session['billing'])
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/api/cart', methods=['GET'])
def api_cart():
    return {'ok': True, 'bill': container().cart_service.get_view()}


@app.route('/api/cart/add', methods=['POST'])
def api_cart_add():
    """Espera JSON con itemId. Agrega una unidad."""
    cart = container().cart_service
    state = cart.add_item(str(_json_body().get('itemId') or ''))
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/quantity', methods=['POST'])
def api_cart_quantity():
    data = _json_body()
    cart = container().cart_service
    state = cart.update_quantity(data.get('index'), data.get('qty'))
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/price', methods=['POST'])
def api_cart_price():
    data = _json_body()
    cart = container().cart_service
    state = cart.update_price(data.get('index'), data.get('price'))
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/remove', methods=['POST'])
def api_cart_remove():
    cart = container().cart_service
    state = cart.remove_item(_json_body().get('index'))
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/adjustments', methods=['POST'])
def api_cart_adjustments():
    """JSON con cualquiera de: markup, discount, paymentMethod, amountPaid, billDate."""
    cart = container().cart_service
    state = cart.set_adjustments(_json_body())
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/customer', methods=['POST'])
def api_cart_customer():
    """JSON con customerId (null para quitar el cliente)."""
    cart = container().cart_service
    state = cart.select_customer(_json_body().get('customerId'))
    return {'ok': True, 'bill': cart.get_view(state)}


@app.route('/api/cart/clear', methods=['POST'])
def api_cart_clear():
    cart = container().cart_service
    return {'ok': True, 'bill': cart.get_view(cart.clear())}


@app.route('/api/cart/bill-number', methods=['GET'])
def api_cart_bill_number():
    return {'ok': True, 'billNumber': container().billing_service.next_bill_number()}


@app.route('/api/cart/checkout', methods=['POST'])
def api_cart_checkout():
    """
    Guarda la factura. El borrador solo se reemplaza si el backend
    confirmó la factura; ante cualquier error queda intacto.
    """
    c = container()
    result = c.billing_service.checkout(c.cart_service.get_state())
    c.cart_service.save_state(result.state)
    return {
        'ok': True,
        'message': result.message,
        'bill': result.bill.to_dict(),
        'transactions': [t.to_dict() for t in result.transactions],
        'customer': result.customer.to_dict() if result.customer else None,
        'receipt': f'/receipt/{result.bill.id}',
    }


# ═══════════════════════════════════════════════════════════════════════════
# HISTORIAL, PAGOS Y REPORTES
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/api/bills', methods=['GET'])
def api_bills():
    bills = container().billing_service.list_bills(
        request.args.get('status', 'all'),
        request.args.get('q', '')
    )
    return {'ok': True, 'bills': [b.to_dict() for b in bills]}


@app.route('/api/bills/<bill_id>', methods=['GET'])
def api_bill_detail(bill_id):
    bill = container().billing_service.get_bill(bill_id)
    return {'ok': True, 'bill': bill.to_dict()}


@app.route('/api/payments', methods=['POST'])
def api_payments():
    """JSON con customerId, amount, paymentMethod, description."""
    data = _json_body()
    c = container()
    customer_id = str(data.get('customerId') or '')
    if not customer_id:
        raise ValidationError('Please select a customer!')
    customer = c.customer_service.get_customer(customer_id)
    payment = c.payment_service.record_payment(
        customer,
        data.get('amount'),
        data.get('paymentMethod', 'cash'),
        data.get('description', '')
    )
    updated = c.customer_service.refresh_customer(customer_id)
    return {
        'ok': True,
        'message': 'Payment recorded successfully',
        'payment': payment,
        'customer': updated.to_dict() if updated else None
    }, 201


@app.route('/api/reports/sales', methods=['GET'])
def api_reports_sales():
    report = container().report_service.get_sales_report(
        request.args.get('period', 'daily'),
        request.args.get('startDate'),
        request.args.get('endDate')
    )
    rows = []
    for label, row in zip(report['labels'], report['rows']):
        data = row.to_dict()
        data['label'] = label
        data['profitMargin'] = round(row.profit_margin, 2)
        rows.append(data)
    return {
        'ok': True,
        'period': report['period'],
        'startDate': report['startDate'],
        'endDate': report['endDate'],
        'rows': rows,
        'summary': {k: round(v, 2) for k, v in report['summary'].items()},
    }


@app.route('/api/activity', methods=['GET'])
def api_activity():
    try:
        limit = max(1, int(request.args.get('limit', 100)))
    except ValueError:
        raise ValidationError('limit must be a number')
    logs = container().activity_service.get_recent(limit, request.args.get('type'))
    return {'ok': True, 'logs': logs}


# ═══════════════════════════════════════════════════════════════════════════
# RECIBOS
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/cart/receipt')
def cart_receipt():
    c = container()
    state = c.cart_service.get_state()
    context = export_service.draft_receipt(state, c.billing_service.next_bill_number())
    return render_template('receipt.html', **context)


@app.route('/receipt/<bill_id>')
def receipt_page(bill_id):
    c = container()
    bill = c.billing_service.get_bill(bill_id)
    customer = c.customer_service.get_customer(bill.customer_id) if bill.customer_id else None
    return render_template('receipt.html', **export_service.bill_receipt(bill, customer))


# ═══════════════════════════════════════════════════════════════════════════
# EXPORTACIONES CSV
# ═══════════════════════════════════════════════════════════════════════════

@app.route('/bills/export')
def bills_export():
    bills = container().billing_service.list_bills(request.args.get('status', 'all'))
    return _csv_response(*export_service.bills_csv(bills))


@app.route('/customers/export')
def customers_export():
    customers = container().customer_service.list_customers()
    return _csv_response(*export_service.customers_csv(customers))


@app.route('/customers/<customer_id>/transactions/export')
def transactions_export(customer_id):
    service = container().customer_service
    customer = service.get_customer(customer_id)
    return _csv_response(*export_service.transactions_csv(customer, service.list_transactions(customer_id)))


@app.route('/reports/sales/export')
def sales_report_export():
    report = container().report_service.get_sales_report(
        request.args.get('period', 'daily'),
        request.args.get('startDate'),
        request.args.get('endDate')
    )
    return _csv_response(*export_service.sales_report_csv(report['period'], report['rows']))


if __name__ == "__main__":
    # Servidor de desarrollo. En producción usar WSGI (wsgi.py con waitress/gunicorn)
    if not config.DEBUG:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{config.HOST}:{config.PORT}")
        print(f"  Acceso local: http://localhost:{config.PORT}")
        print(f"  Backend: {config.API_BASE_URL}")
        print(f"{'='*50}\n")
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
