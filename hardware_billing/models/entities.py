# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# from_dict/to_dict usan el formato camelCase del servicio de persistencia.
# Las reglas de valores por defecto viven aquí y en utils.py, no en las rutas.
# ==============================================================================

import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from hardware_billing.utils import money, to_float, to_int


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class PaymentMethod(str, Enum):
    """Métodos de pago aceptados."""
    CASH = "cash"      # Paga el total en el momento
    CREDIT = "credit"  # Pago parcial, el resto va a la cuenta del cliente


class BillStatus(str, Enum):
    """Estados posibles de una factura."""
    COMPLETED = "completed"  # Pagado >= total
    PENDING = "pending"      # Queda saldo pendiente


class TransactionType(str, Enum):
    """Tipos de movimiento en la cuenta del cliente."""
    BILL = "bill"
    PAYMENT = "payment"


class ReportPeriod(str, Enum):
    """Agrupaciones del reporte de ventas."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


def _record_id(data: Dict[str, Any]) -> str:
    """El backend usa '_id' (MongoDB); se acepta 'id' como alternativa."""
    value = data.get('_id') or data.get('id') or ''
    return str(value)


def _coerce_method(value: Any) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        return PaymentMethod.CASH


# ==============================================================================
# INVENTARIO
# ==============================================================================

@dataclass(frozen=True)
class Item:
    """
    Producto del catálogo (solo lectura para el núcleo de facturación).

    Attributes:
        id: Identificador en el backend
        name: Nombre del producto
        item_type: Tipo (ej: "Tubo", "Codo")
        size: Medida (ej: "1/2")
        barcode: Código de barras (alfanumérico, opcional)
        cost_price: Precio de costo
        selling_price: Precio de venta
        tax_rate: Impuesto en porcentaje (0-100)
        stock: Unidades disponibles según el último snapshot
    """
    id: str
    name: str
    item_type: str = ''
    size: str = ''
    barcode: str = ''
    cost_price: float = 0.0
    selling_price: float = 0.0
    tax_rate: float = 0.0
    stock: int = 0

    def label(self) -> str:
        """Nombre completo como aparece en el recibo."""
        text = f"{self.name} {self.item_type}".strip()
        if self.size:
            text += f" ({self.size})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para el backend."""
        return {
            '_id': self.id,
            'name': self.name,
            'type': self.item_type,
            'size': self.size,
            'barcode': self.barcode,
            'costPrice': self.cost_price,
            'sellingPrice': self.selling_price,
            'taxRate': self.tax_rate,
            'stock': self.stock,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Item':
        """Crea instancia desde diccionario."""
        return cls(
            id=_record_id(data),
            name=data.get('name') or '',
            item_type=data.get('type') or '',
            size=data.get('size') or '',
            barcode=data.get('barcode') or '',
            cost_price=to_float(data.get('costPrice')),
            selling_price=to_float(data.get('sellingPrice')),
            tax_rate=to_float(data.get('taxRate')),
            stock=to_int(data.get('stock')),
        )


# ==============================================================================
# CLIENTES
# ==============================================================================

@dataclass(frozen=True)
class Customer:
    """
    Cliente con cuenta corriente.

    Attributes:
        balance: Saldo firmado. Positivo = el cliente le debe a la tienda.
                 Solo el backend lo modifica.
    """
    id: str
    name: str
    phone: str = ''
    account_number: str = ''
    address: str = ''
    balance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'name': self.name,
            'phone': self.phone,
            'address': self.address,
            'accountNumber': self.account_number,
            'balance': self.balance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=_record_id(data),
            name=data.get('name') or '',
            phone=str(data.get('phone') or ''),
            account_number=str(data.get('accountNumber') or ''),
            address=data.get('address') or '',
            balance=to_float(data.get('balance')),
        )


# ==============================================================================
# CARRITO
# ==============================================================================

@dataclass(frozen=True)
class LineItem:
    """
    Una línea del carrito: un producto a una cantidad/precio.

    unit_price y unit_cost se congelan al agregar el item, así la ganancia
    no cambia si el catálogo se actualiza después.
    """
    item_id: str
    name: str
    quantity: int
    unit_price: float
    unit_cost: float
    custom_price: Optional[float] = None
    item_type: str = ''
    size: str = ''

    @property
    def price(self) -> float:
        """Precio efectivo: el personalizado si existe, si no el unitario."""
        return self.custom_price if self.custom_price is not None else self.unit_price

    @property
    def total(self) -> float:
        return self.quantity * self.price

    @property
    def total_cost(self) -> float:
        return self.quantity * self.unit_cost

    def label(self) -> str:
        text = f"{self.name} {self.item_type}".strip()
        if self.size:
            text += f" ({self.size})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            'itemId': self.item_id,
            'name': self.name,
            'type': self.item_type,
            'size': self.size,
            'qty': self.quantity,
            'unitPrice': self.unit_price,
            'customPrice': self.custom_price,
            'unitCost': self.unit_cost,
            'total': self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        custom = data.get('customPrice')
        return cls(
            item_id=str(data.get('itemId') or ''),
            name=data.get('name') or '',
            quantity=max(1, to_int(data.get('qty'), 1)),
            unit_price=to_float(data.get('unitPrice')),
            unit_cost=to_float(data.get('unitCost')),
            custom_price=None if custom is None else to_float(custom),
            item_type=data.get('type') or '',
            size=data.get('size') or '',
        )


@dataclass(frozen=True)
class Cart:
    """Secuencia ordenada de líneas, como máximo una por item_id."""
    lines: Tuple[LineItem, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> LineItem:
        return self.lines[index]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def index_of(self, item_id: str) -> Optional[int]:
        """Posición de la línea del item o None si no está en el carrito."""
        for i, line in enumerate(self.lines):
            if line.item_id == item_id:
                return i
        return None

    def with_line(self, index: int, line: LineItem) -> 'Cart':
        lines = list(self.lines)
        lines[index] = line
        return Cart(tuple(lines))

    def to_list(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_list(cls, data: Optional[List[Dict[str, Any]]]) -> 'Cart':
        return cls(tuple(LineItem.from_dict(d) for d in (data or [])))


# ==============================================================================
# TOTALES (derivados, nunca se guardan solos)
# ==============================================================================

@dataclass(frozen=True)
class Totals:
    """Resultado del calculador de totales. Montos sin redondear."""
    subtotal: float
    markup_amount: float
    marked_up_subtotal: float
    discount_amount: float
    grand_total: float
    total_cost: float
    profit: float
    paid: float
    remaining: float
    projected_new_balance: float


# ==============================================================================
# FACTURAS
# ==============================================================================

@dataclass(frozen=True)
class BillLine:
    """Línea persistida de una factura."""
    item_id: str
    quantity: int
    unit_price: float
    custom_price: Optional[float]
    unit_cost: float
    total: float
    total_cost: float
    name: str = ''
    item_type: str = ''
    size: str = ''

    @property
    def price(self) -> float:
        return self.custom_price if self.custom_price is not None else self.unit_price

    def label(self) -> str:
        text = f"{self.name} {self.item_type}".strip()
        if self.size:
            text += f" ({self.size})"
        return text

    @classmethod
    def from_line(cls, line: LineItem) -> 'BillLine':
        return cls(
            item_id=line.item_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            custom_price=line.custom_price,
            unit_cost=line.unit_cost,
            total=line.total,
            total_cost=line.total_cost,
            name=line.name,
            item_type=line.item_type,
            size=line.size,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'itemId': self.item_id,
            'quantity': self.quantity,
            'unitPrice': self.unit_price,
            'customPrice': self.custom_price,
            'unitCost': self.unit_cost,
            'total': self.total,
            'totalCost': self.total_cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BillLine':
        # itemId puede venir poblado con el documento del item
        raw_item = data.get('itemId')
        item = raw_item if isinstance(raw_item, dict) else {}
        custom = data.get('customPrice')
        quantity = to_int(data.get('quantity'))
        unit_price = to_float(data.get('unitPrice'))
        unit_cost = to_float(data.get('unitCost'))
        custom_price = None if custom is None else to_float(custom)
        price = custom_price if custom_price is not None else unit_price
        return cls(
            item_id=_record_id(item) if item else str(raw_item or ''),
            quantity=quantity,
            unit_price=unit_price,
            custom_price=custom_price,
            unit_cost=unit_cost,
            total=to_float(data.get('total'), quantity * price),
            total_cost=to_float(data.get('totalCost'), quantity * unit_cost),
            name=data.get('name') or item.get('name') or '',
            item_type=data.get('type') or item.get('type') or '',
            size=data.get('size') or item.get('size') or '',
        )


@dataclass(frozen=True)
class Bill:
    """
    Factura persistida. Se construye una sola vez en el checkout y después
    es de solo lectura (el backend puede cambiar el estado).

    Attributes:
        markup: Recargo en porcentaje
        discount: Descuento en porcentaje
        partial_payment: Monto pagado al momento de facturar
    """
    customer_id: str
    items: Tuple[BillLine, ...]
    subtotal: float
    markup: float
    discount: float
    grand_total: float
    payment_type: PaymentMethod
    partial_payment: float
    status: BillStatus
    id: str = ''
    customer_name: str = ''
    created_at: str = ''

    @property
    def remaining(self) -> float:
        return self.grand_total - self.partial_payment

    @property
    def short_id(self) -> str:
        return self.id[-6:]

    def to_payload(self) -> Dict[str, Any]:
        """Cuerpo de POST /bills."""
        return {
            'customerId': self.customer_id,
            'items': [line.to_dict() for line in self.items],
            'subtotal': self.subtotal,
            'markup': self.markup,
            'discount': self.discount,
            'grandTotal': self.grand_total,
            'paymentType': self.payment_type.value,
            'partialPayment': self.partial_payment,
            'status': self.status.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_payload()
        data.update({
            '_id': self.id,
            'customerName': self.customer_name,
            'createdAt': self.created_at,
            'remaining': money(self.remaining),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bill':
        # customerId puede venir como string o como documento poblado
        raw_customer = data.get('customerId')
        if isinstance(raw_customer, dict):
            customer_id = _record_id(raw_customer)
            customer_name = raw_customer.get('name') or ''
        else:
            customer_id = str(raw_customer or '')
            customer_name = data.get('customerName') or ''
        try:
            status = BillStatus(data.get('status'))
        except ValueError:
            status = BillStatus.PENDING
        return cls(
            id=_record_id(data),
            customer_id=customer_id,
            customer_name=customer_name,
            items=tuple(BillLine.from_dict(d) for d in data.get('items') or []),
            subtotal=to_float(data.get('subtotal')),
            markup=to_float(data.get('markup')),
            discount=to_float(data.get('discount')),
            grand_total=to_float(data.get('grandTotal')),
            payment_type=_coerce_method(data.get('paymentType')),
            partial_payment=to_float(data.get('partialPayment')),
            status=status,
            created_at=data.get('createdAt') or '',
        )


@dataclass(frozen=True)
class Transaction:
    """Movimiento del libro mayor del cliente (propiedad del backend)."""
    id: str
    customer_id: str
    type: str
    amount: float
    description: str = ''
    bill_id: str = ''
    created_at: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            '_id': self.id,
            'customerId': self.customer_id,
            'billId': self.bill_id,
            'type': self.type,
            'amount': self.amount,
            'description': self.description,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        raw_customer = data.get('customerId')
        raw_bill = data.get('billId')
        return cls(
            id=_record_id(data),
            customer_id=_record_id(raw_customer) if isinstance(raw_customer, dict) else str(raw_customer or ''),
            bill_id=_record_id(raw_bill) if isinstance(raw_bill, dict) else str(raw_bill or ''),
            type=data.get('type') or '',
            amount=to_float(data.get('amount')),
            description=data.get('description') or '',
            created_at=data.get('createdAt') or '',
        )


# ==============================================================================
# REPORTES
# ==============================================================================

@dataclass(frozen=True)
class SalesReportRow:
    """Fila del reporte de ventas agrupado por período."""
    period: str
    total_sales: float = 0.0
    total_profit: float = 0.0
    bill_count: int = 0
    cash_sales: float = 0.0
    cash_profit: float = 0.0
    credit_sales: float = 0.0
    credit_profit: float = 0.0

    @property
    def profit_margin(self) -> float:
        if self.total_sales > 0:
            return self.total_profit / self.total_sales * 100
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period,
            'totalSales': self.total_sales,
            'totalProfit': self.total_profit,
            'billCount': self.bill_count,
            'cashSales': self.cash_sales,
            'cashProfit': self.cash_profit,
            'creditSales': self.credit_sales,
            'creditProfit': self.credit_profit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SalesReportRow':
        return cls(
            period=str(data.get('period') or ''),
            total_sales=to_float(data.get('totalSales')),
            total_profit=to_float(data.get('totalProfit')),
            bill_count=to_int(data.get('billCount')),
            cash_sales=to_float(data.get('cashSales')),
            cash_profit=to_float(data.get('cashProfit')),
            credit_sales=to_float(data.get('creditSales')),
            credit_profit=to_float(data.get('creditProfit')),
        )


# ==============================================================================
# ESTADO DE LA FACTURA EN CURSO
# ==============================================================================

@dataclass(frozen=True)
class BillingState:
    """
    Borrador de factura de una sesión. Inmutable: cada intención del usuario
    produce un estado nuevo (ver services/billing_state.py).

    Attributes:
        draft_id: Identifica el borrador para el guard de peticiones en curso
        amount_paid: Monto tal como lo escribió el usuario (solo aplica a crédito)
    """
    draft_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    cart: Cart = field(default_factory=Cart)
    customer: Optional[Customer] = None
    markup: float = 0.0
    discount: float = 0.0
    payment_method: PaymentMethod = PaymentMethod.CASH
    amount_paid: str = ''
    bill_date: str = field(default_factory=lambda: date.today().isoformat())

    def evolve(self, **changes: Any) -> 'BillingState':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Formato para guardar en la sesión de Flask."""
        return {
            'draft_id': self.draft_id,
            'cart': self.cart.to_list(),
            'customer': self.customer.to_dict() if self.customer else None,
            'markup': self.markup,
            'discount': self.discount,
            'payment_method': self.payment_method.value,
            'amount_paid': self.amount_paid,
            'bill_date': self.bill_date,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BillingState':
        if not data:
            return cls()
        customer = data.get('customer')
        return cls(
            draft_id=data.get('draft_id') or uuid.uuid4().hex,
            cart=Cart.from_list(data.get('cart')),
            customer=Customer.from_dict(customer) if customer else None,
            markup=to_float(data.get('markup')),
            discount=to_float(data.get('discount')),
            payment_method=_coerce_method(data.get('payment_method')),
            amount_paid=str(data.get('amount_paid') or ''),
            bill_date=data.get('bill_date') or date.today().isoformat(),
        )
