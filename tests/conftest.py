"""Shared test fixtures."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from catalog_extractor.common.config_loader import ScanSettings
from catalog_extractor.models import Product, RelayDescriptor, ResponseShape, StoreConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def listing_jsonld_html():
    """Listing page whose products are published as JSON-LD."""
    return (FIXTURES_DIR / "listing_jsonld.html").read_text(encoding="utf-8")


@pytest.fixture
def listing_cards_html():
    """Listing page with product cards only (no structured data)."""
    return (FIXTURES_DIR / "listing_cards.html").read_text(encoding="utf-8")


@pytest.fixture
def catalog_page():
    """One page of the catalog search endpoint response."""
    return json.loads((FIXTURES_DIR / "catalog_page.json").read_text(encoding="utf-8"))


@pytest.fixture
def catalog_item(catalog_page):
    """First item of the catalog page fixture."""
    return catalog_page[0]


@pytest.fixture
def sample_product():
    """A listable product with every field set."""
    return Product(
        name="Ar Condicionado Split Inverter 12000 BTU",
        brand="Samsung",
        cash_price=Decimal("1999.90"),
        installment_price=Decimal("2199.00"),
        reference_code="AR12BVHZCWK",
        list_price=Decimal("2599.00"),
        available=True,
        link="https://www.climario.com.br/ar-split-inverter-12000/p",
        image_url="https://climario.vteximg.com.br/arquivos/ids/1001/ar.jpg",
        product_id="1001",
        sku_id="2001",
    )


@pytest.fixture
def relays():
    """Three-relay chain: wrapped, raw, raw."""
    return (
        RelayDescriptor("A", "https://a.example/get?url={url}", ResponseShape.WRAPPED, 30000),
        RelayDescriptor("B", "https://b.example/fetch/{raw_url}", ResponseShape.RAW, 30000),
        RelayDescriptor("C", "https://c.example/proxy?quest={url}", ResponseShape.RAW, 30000),
    )


@pytest.fixture
def sleeps():
    """Records every sleep instead of sleeping."""
    calls = []

    def fake_sleep(seconds):
        calls.append(seconds)

    fake_sleep.calls = calls
    return fake_sleep


@pytest.fixture
def settings():
    """Default scan settings."""
    return ScanSettings()


@pytest.fixture
def climario():
    return StoreConfig(
        key="climario",
        name="Clima Rio",
        base_url="https://www.climario.com.br",
        default_link="https://www.climario.com.br/ar-condicionado/multi-split",
    )


@pytest.fixture
def sample_stores_config():
    """Raw 'stores' mapping as found in stores.yaml."""
    return {
        "climario": {
            "name": "Clima Rio",
            "base_url": "https://www.climario.com.br/",
            "default_link": "https://www.climario.com.br/ar-condicionado/multi-split",
            "sales_channel": 1,
        },
        "leveros": {
            "name": "Leveros",
            "base_url": "https://www.leveros.com.br",
        },
    }


def make_item(index, price=100.0, spot_price=None, quantity=5, link=None):
    """Minimal catalog search item (for building pages in tests)."""
    return {
        "productId": str(index),
        "productName": f"Produto de teste {index}",
        "productReference": f"REF-{index}",
        "brand": "Marca",
        "link": link or f"https://www.climario.com.br/produto-{index}/p",
        "items": [{
            "itemId": str(1000 + index),
            "images": [{"imageUrl": f"https://img.example/{index}.jpg"}],
            "sellers": [{"commertialOffer": {
                "Price": price,
                "SpotPrice": spot_price,
                "ListPrice": price,
                "AvailableQuantity": quantity,
            }}],
        }],
    }


@pytest.fixture
def item_factory():
    return make_item
