"""Tests for catalog_extractor/common/price_utils.py"""

from decimal import Decimal

import pytest

from catalog_extractor.common.price_utils import (
    fill_missing_prices,
    find_currency_amounts,
    join_split_amounts,
    parse_installment_total,
    parse_installments,
    parse_price,
    to_decimal,
)


class TestParsePrice:
    @pytest.mark.parametrize("text,expected", [
        ("R$ 2.500,00", Decimal("2500.00")),
        ("R$ 1.999,90", Decimal("1999.90")),
        ("1999.90", Decimal("1999.90")),
        ("2.500", Decimal("2500.00")),
        ("por 89,90", Decimal("89.90")),
        ("99,9", Decimal("99.90")),
        ("R$ 1.299,00.", Decimal("1299.00")),
        ("R$ 1.250.000,00", Decimal("1250000.00")),
    ])
    def test_parses_brazilian_and_plain_formats(self, text, expected):
        assert parse_price(text) == expected

    def test_empty_text(self):
        assert parse_price("") is None

    def test_none(self):
        assert parse_price(None) is None

    def test_text_without_number(self):
        assert parse_price("sem preço") is None

    def test_uses_first_number(self):
        assert parse_price("R$ 250,00 em 10x") == Decimal("250.00")


class TestToDecimal:
    def test_float_keeps_decimal_value(self):
        assert to_decimal(1999.9) == Decimal("1999.90")

    def test_int(self):
        assert to_decimal(2899) == Decimal("2899.00")

    def test_string(self):
        assert to_decimal("1.999,90") == Decimal("1999.90")

    def test_decimal_is_quantized(self):
        assert to_decimal(Decimal("10.005")) == Decimal("10.01")

    def test_bool_is_not_a_price(self):
        assert to_decimal(True) is None

    def test_none_and_unsupported(self):
        assert to_decimal(None) is None
        assert to_decimal([10]) is None


class TestFindCurrencyAmounts:
    def test_finds_all_in_order(self):
        text = "De R$ 3.100,00 Por R$ 2.500,00"
        assert find_currency_amounts(text) == [Decimal("3100.00"), Decimal("2500.00")]

    def test_without_space_after_symbol(self):
        assert find_currency_amounts("R$2500") == [Decimal("2500.00")]

    def test_ignores_numbers_without_currency(self):
        assert find_currency_amounts("Split 12000 BTU 220V") == []

    def test_empty(self):
        assert find_currency_amounts(None) == []

    def test_amounts_split_across_spans(self):
        text = "R$ \xa0 3 . 100 , 00 R$ \xa0 2 . 500 , 00"
        assert find_currency_amounts(text) == [Decimal("3100.00"), Decimal("2500.00")]


class TestJoinSplitAmounts:
    @pytest.mark.parametrize("text,expected", [
        ("R$ 2 . 500 , 00", "R$ 2.500,00"),
        ("R$ 1 . 250 . 000 , 00", "R$ 1.250.000,00"),
        ("R$ 99 , 9", "R$ 99,9"),
        ("R$ 2.500,00", "R$ 2.500,00"),
    ])
    def test_joins_amount_parts(self, text, expected):
        assert join_split_amounts(text) == expected

    def test_separate_figures_stay_apart(self):
        text = "R$ 1.999,90, 10x de R$ 199,99"
        assert join_split_amounts(text) == text

    def test_parse_price_on_split_spans(self):
        assert parse_price("R$ 2 . 500 , 00") == Decimal("2500.00")


class TestInstallments:
    def test_installment_total(self):
        assert parse_installment_total("10x de R$ 250,00") == Decimal("2500.00")

    def test_without_de(self):
        assert parse_installment_total("12 x R$ 99,90") == Decimal("1198.80")

    def test_multiplication_sign(self):
        assert parse_installment_total("em até 10× de 250,00 sem juros") == Decimal("2500.00")

    def test_count_and_value(self):
        assert parse_installments("ou 6x de R$ 50,00") == (6, Decimal("50.00"))

    def test_no_phrase(self):
        assert parse_installment_total("à vista no pix") is None
        assert parse_installment_total(None) is None

    @pytest.mark.parametrize("name", [
        "Multi Split LG 2x9000 BTUs",
        "Kit 3x12000 BTUs Inverter",
        "Cortina de Ar 1x90cm",
    ])
    def test_product_names_are_not_installments(self, name):
        assert parse_installments(name) is None

    def test_name_followed_by_real_phrase(self):
        text = "Multi Split LG 2x9000 BTUs R$ 4.999,00 ou 10x de R$ 499,90"
        assert parse_installments(text) == (10, Decimal("499.90"))

    def test_split_value_spans(self):
        assert parse_installment_total("10x de R$ 250 , 00") == Decimal("2500.00")


class TestFillMissingPrices:
    def test_cash_known_fills_installment(self):
        assert fill_missing_prices(Decimal("10.00"), None) == (Decimal("10.00"), Decimal("10.00"))

    def test_installment_known_fills_cash(self):
        assert fill_missing_prices(None, Decimal("5.00")) == (Decimal("5.00"), Decimal("5.00"))

    def test_zero_counts_as_unknown(self):
        assert fill_missing_prices(Decimal("0"), Decimal("5.00")) == (Decimal("5.00"), Decimal("5.00"))

    def test_both_known_unchanged(self):
        assert fill_missing_prices(Decimal("3.00"), Decimal("4.00")) == (Decimal("3.00"), Decimal("4.00"))

    def test_both_unknown_unchanged(self):
        assert fill_missing_prices(None, None) == (None, None)
