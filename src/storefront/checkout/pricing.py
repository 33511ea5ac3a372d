"""Order pricing — line totals, the COD handling fee, tax and rounding.

Amounts are computed in ``Decimal`` and handed back as floats for storage.
Gateway payments are charged in whole currency units, so their total is
rounded half-up to the nearest unit; COD totals keep paise.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.order.order import PaymentMethod

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


@dataclass(frozen=True)
class OrderCharges:
    subtotal: float
    cod_fee: float
    tax_amount: float
    total_amount: float


def _money(value) -> Decimal:
    return Decimal(str(value))


def price_order(lines, payment_method: PaymentMethod, cod_fee=0.0, tax_rate=0.0) -> OrderCharges:
    """Price a checkout.

    ``lines`` are mappings with ``price`` and ``quantity``. Tax applies to the
    subtotal plus any fee.
    """
    subtotal = sum((_money(line["price"]) * line["quantity"] for line in lines), Decimal("0"))
    fee = _money(cod_fee) if payment_method == PaymentMethod.COD else Decimal("0")
    tax = ((subtotal + fee) * _money(tax_rate)).quantize(_CENT, rounding=ROUND_HALF_UP)

    total = subtotal + fee + tax
    if payment_method == PaymentMethod.GATEWAY:
        total = total.quantize(_UNIT, rounding=ROUND_HALF_UP)
    else:
        total = total.quantize(_CENT, rounding=ROUND_HALF_UP)

    return OrderCharges(
        subtotal=float(subtotal.quantize(_CENT, rounding=ROUND_HALF_UP)),
        cod_fee=float(fee),
        tax_amount=float(tax),
        total_amount=float(total),
    )


def to_minor_units(amount) -> int:
    """Gateway amounts travel as integers in the smallest currency unit."""
    return int((_money(amount) * 100).quantize(_UNIT, rounding=ROUND_HALF_UP))
