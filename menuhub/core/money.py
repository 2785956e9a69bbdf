from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
# Cabe na coluna String(32) e a soma de dois valores não estoura o contexto decimal.
MAX_INTEGER_DIGITS = 15


def to_decimal(value: str | int | Decimal) -> Decimal:
    """Parse a money value without ever going through binary floating point."""
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError("Valor monetário deve ser informado como texto decimal")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError("Valor monetário inválido") from exc
    if not amount.is_finite():
        raise ValueError("Valor monetário inválido")
    return amount


def _to_cents(amount: Decimal) -> Decimal:
    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValueError(f"Valor monetário excede {MAX_INTEGER_DIGITS} dígitos inteiros")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("Valor monetário inválido") from exc


def normalize_money(value: str | int | Decimal, *, allow_negative: bool = False) -> str:
    """Return ``value`` as a two-place decimal string; never rounds."""
    amount = to_decimal(value)
    if amount < 0 and not allow_negative:
        raise ValueError("Valor monetário não pode ser negativo")
    cents = _to_cents(amount)
    if cents != amount:
        raise ValueError("Valor monetário aceita no máximo duas casas decimais")
    return str(cents)


def apply_price_modifier(base_price: str, modifier: str) -> str:
    total = to_decimal(base_price) + to_decimal(modifier)
    if total < 0:
        raise ValueError("Preço final não pode ser negativo")
    return str(_to_cents(total))
