"""
Price Utilities

Parses currency-formatted price text ("R$ 1.999,90"), raw JSON price
values (1999.9, "1999.90") and installment phrases ("10x de R$ 250,00")
into Decimal magnitudes in the source currency.

No locale or currency formatting happens here; callers get plain decimals.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")

# First number-looking token: digits with optional thousands/decimal separators
_NUMBER_RE = re.compile(r'\d[\d.,]*')

# Dot-grouped thousands without decimals, e.g. "2.500" or "1.250.000"
_DOT_THOUSANDS_RE = re.compile(r'\d{1,3}(?:\.\d{3})+')

# Currency-prefixed amount, e.g. "R$ 2.500,00", "R$2500", "R$ 99,9"
CURRENCY_AMOUNT_RE = re.compile(r'R\$\s*(\d[\d.]*(?:,\d{1,2})?)')

# "10x de R$ 250,00", "12 x R$ 99,90", "em até 10× de 250,00".
# The value needs "de" or "R$" before it so "2x9000 BTUs" is not a phrase.
INSTALLMENT_RE = re.compile(
    r'\b(\d{1,2})\s*[x×]\s*(?:(?:de\s+)?R\$\s*|de\s+)(\d[\d.]*(?:,\d{1,2})?)',
    re.IGNORECASE,
)

# Separators padded by whitespace when markup splits an amount into spans,
# e.g. "2 . 500 , 00" from currencyInteger/currencyGroup/currencyFraction
_SPLIT_THOUSANDS_RE = re.compile(r'(?<=\d)\s*\.\s*(?=\d{3}(?!\w))')
_SPLIT_DECIMALS_RE = re.compile(r'(?<=\d)\s*,\s*(?=\d{1,2}(?!\w))')


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def join_split_amounts(text: str) -> str:
    """
    Close the gaps around thousands and decimal separators inside amounts.

    "R$ 2 . 500 , 00" -> "R$ 2.500,00". Text joined from per-part price
    spans needs this before any amount regex runs on it.
    """
    text = _SPLIT_THOUSANDS_RE.sub('.', text)
    return _SPLIT_DECIMALS_RE.sub(',', text)


def _normalize_number(token: str) -> str:
    """Turn a Brazilian or plain number token into a Decimal-parsable string."""
    token = token.rstrip('.,')
    if ',' in token:
        # 1.234,56 -> 1234.56
        return token.replace('.', '').replace(',', '.')
    if _DOT_THOUSANDS_RE.fullmatch(token):
        # 2.500 -> 2500
        return token.replace('.', '')
    return token


def parse_price(text: str | None) -> Decimal | None:
    """
    Parse the first price found in a piece of text.

    Args:
        text: Price text such as "R$ 2.500,00", "1999.90" or "por 89,90"

    Returns:
        Price as Decimal with two decimal places, or None if no number found
    """
    if not text:
        return None

    match = _NUMBER_RE.search(join_split_amounts(str(text)))
    if not match:
        return None

    try:
        return _quantize(Decimal(_normalize_number(match.group(0))))
    except InvalidOperation:
        return None


def to_decimal(value) -> Decimal | None:
    """
    Convert a JSON price value (number or string) to Decimal.

    Floats go through str() so 1999.9 becomes Decimal("1999.90") and not
    its binary approximation.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return _quantize(value)
    if isinstance(value, (int, float)):
        try:
            return _quantize(Decimal(str(value)))
        except InvalidOperation:
            return None
    if isinstance(value, str):
        return parse_price(value)
    return None


def find_currency_amounts(text: str | None) -> list[Decimal]:
    """
    Find every currency-formatted amount in text, in order of appearance.

    Args:
        text: Visible text of a product card

    Returns:
        List of parsed amounts (may be empty)
    """
    if not text:
        return []

    amounts = []
    for raw in CURRENCY_AMOUNT_RE.findall(join_split_amounts(text)):
        amount = parse_price(raw)
        if amount is not None:
            amounts.append(amount)
    return amounts


def parse_installments(text: str | None) -> tuple[int, Decimal] | None:
    """
    Parse an installment phrase into (count, value per installment).

    Returns:
        Tuple of (count, value) or None when no phrase is present
    """
    if not text:
        return None

    match = INSTALLMENT_RE.search(join_split_amounts(text))
    if not match:
        return None

    count = int(match.group(1))
    value = parse_price(match.group(2))
    if count <= 0 or value is None:
        return None
    return count, value


def parse_installment_total(text: str | None) -> Decimal | None:
    """
    Parse an installment phrase and return the financed total.

    "10x de R$ 250,00" -> Decimal("2500.00")
    """
    parsed = parse_installments(text)
    if parsed is None:
        return None
    count, value = parsed
    return _quantize(value * count)


def fill_missing_prices(
    cash_price: Decimal | None,
    installment_price: Decimal | None,
) -> tuple[Decimal | None, Decimal | None]:
    """
    Cross-fill cash and installment prices when only one is known.

    A price is known when it is present and greater than zero. This is a
    fallback heuristic: stores usually quote both, and when one is missing
    the other is the best available figure, not a verified one.

    Returns:
        (cash_price, installment_price) after cross-filling
    """
    cash_known = cash_price is not None and cash_price > 0
    installment_known = installment_price is not None and installment_price > 0

    if cash_known and not installment_known:
        installment_price = cash_price
    elif installment_known and not cash_known:
        cash_price = installment_price

    return cash_price, installment_price
