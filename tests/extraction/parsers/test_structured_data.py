"""Tests for catalog_extractor/extraction/parsers/structured_data.py"""

import json
from decimal import Decimal

import pytest
from bs4 import BeautifulSoup

from catalog_extractor.extraction.parsers.structured_data import (
    ItemListNode,
    ProductNode,
    StructuredDataParser,
    UnknownNode,
    classify_node,
)


def make_soup_with_jsonld(*blocks) -> BeautifulSoup:
    """Create a BeautifulSoup with one JSON-LD script tag per block."""
    scripts = "".join(
        f'<script type="application/ld+json">{b if isinstance(b, str) else json.dumps(b)}</script>'
        for b in blocks
    )
    return BeautifulSoup(f"<html><head>{scripts}</head><body></body></html>", "lxml")


def product_block(name="AC 12000 BTU", price=1999.90, **extra):
    block = {"@type": "Product", "name": name, "offers": {"@type": "Offer", "price": price}}
    block.update(extra)
    return block


@pytest.fixture
def parser():
    return StructuredDataParser(store_name="Clima Rio", base_url="https://www.climario.com.br/ar")


class TestClassifyNode:
    def test_product(self):
        assert isinstance(classify_node({"@type": "Product"}), ProductNode)

    def test_product_in_type_list(self):
        assert isinstance(classify_node({"@type": ["Product", "Thing"]}), ProductNode)

    def test_item_list(self):
        node = classify_node({"@type": "ItemList", "itemListElement": [{"a": 1}]})
        assert isinstance(node, ItemListNode)
        assert node.children == [{"a": 1}]

    def test_graph(self):
        node = classify_node({"@graph": [{"@type": "Product"}]})
        assert isinstance(node, ItemListNode)

    def test_list_item_wrapper(self):
        node = classify_node({"@type": "ListItem", "item": {"@type": "Product"}})
        assert isinstance(node, ItemListNode)
        assert node.children == [{"@type": "Product"}]

    def test_bare_array(self):
        assert isinstance(classify_node([1, 2]), ItemListNode)

    def test_unknown(self):
        assert isinstance(classify_node({"@type": "Organization"}), UnknownNode)
        assert isinstance(classify_node("text"), UnknownNode)
        assert isinstance(classify_node(None), UnknownNode)


class TestParse:
    def test_single_product(self, parser):
        products = parser.parse(make_soup_with_jsonld(product_block()))
        assert len(products) == 1
        p = products[0]
        assert p.name == "AC 12000 BTU"
        assert p.cash_price == Decimal("1999.90")
        assert p.installment_price == Decimal("1999.90")
        assert p.available is True

    def test_defaults(self, parser):
        p = parser.parse(make_soup_with_jsonld(product_block()))[0]
        assert p.reference_code == "N/A"
        assert p.brand == "Clima Rio"
        assert p.link == ""

    def test_fields(self, parser):
        block = product_block(
            sku="AR12", brand={"@type": "Brand", "name": "Samsung"},
            url="/ac-12000/p", image=["//cdn.example/ac.jpg"],
        )
        p = parser.parse(make_soup_with_jsonld(block))[0]
        assert p.reference_code == "AR12"
        assert p.brand == "Samsung"
        assert p.link == "https://www.climario.com.br/ac-12000/p"
        assert p.image_url == "https://cdn.example/ac.jpg"

    def test_nested_item_list(self, parser):
        block = {
            "@type": "ItemList",
            "itemListElement": [
                {"@type": "ListItem", "position": 1, "item": product_block("Split Um", 100)},
                {"@type": "ListItem", "position": 2, "item": product_block("Split Dois", 200)},
            ],
        }
        products = parser.parse(make_soup_with_jsonld(block))
        assert [p.name for p in products] == ["Split Um", "Split Dois"]

    def test_graph_with_other_types(self, parser):
        block = {"@graph": [{"@type": "WebSite", "name": "Loja"}, product_block()]}
        assert len(parser.parse(make_soup_with_jsonld(block))) == 1

    def test_top_level_array(self, parser):
        products = parser.parse(make_soup_with_jsonld([product_block("Split A", 1), product_block("Split B", 2)]))
        assert len(products) == 2

    def test_zero_price_skipped(self, parser):
        assert parser.parse(make_soup_with_jsonld(product_block(price=0))) == []

    def test_missing_offer_skipped(self, parser):
        assert parser.parse(make_soup_with_jsonld({"@type": "Product", "name": "Split"})) == []

    def test_invalid_json_block_skipped(self, parser):
        soup = make_soup_with_jsonld("not valid json{{{", product_block())
        assert len(parser.parse(soup)) == 1

    def test_no_script(self, parser):
        assert parser.parse(BeautifulSoup("<html><body></body></html>", "lxml")) == []

    def test_blocks_in_document_order(self, parser):
        soup = make_soup_with_jsonld(product_block("Primeiro", 1), product_block("Segundo", 2))
        assert [p.name for p in parser.parse(soup)] == ["Primeiro", "Segundo"]


class TestExtractPrice:
    def test_single_offer(self, parser):
        assert parser.extract_price({"price": "7.71"}) == Decimal("7.71")

    def test_offers_array_first_priced(self, parser):
        assert parser.extract_price([{"price": 0}, {"price": "12.50"}]) == Decimal("12.50")

    def test_aggregate_offer(self, parser):
        offer = {"@type": "AggregateOffer", "lowPrice": 2299.0, "highPrice": 2499.0}
        assert parser.extract_price(offer) == Decimal("2299.00")

    def test_nested_offers(self, parser):
        offer = {"@type": "AggregateOffer", "offers": [{"price": "99.90"}]}
        assert parser.extract_price(offer) == Decimal("99.90")

    def test_brazilian_formatted_string(self, parser):
        assert parser.extract_price({"price": "1.999,90"}) == Decimal("1999.90")

    def test_no_offer(self, parser):
        assert parser.extract_price(None) is None
        assert parser.extract_price("1999") is None


class TestExtractBrandAndImage:
    def test_brand_as_string(self, parser):
        assert parser.extract_brand({"brand": " LG "}) == "LG"

    def test_no_brand(self, parser):
        assert parser.extract_brand({}) == ""

    def test_image_object(self, parser):
        assert parser.extract_image({"image": {"url": "https://x/i.jpg"}}) == "https://x/i.jpg"

    def test_no_image(self, parser):
        assert parser.extract_image({}) == ""
