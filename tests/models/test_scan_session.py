"""Tests for catalog_extractor/models/session.py"""

from decimal import Decimal

import pytest

from catalog_extractor.exceptions import PersistentFailure, RelayExhausted, SnapshotMissing
from catalog_extractor.models import (
    ExtractionResult,
    Product,
    ScanSession,
    ScanStatus,
    TerminationReason,
    catalog_summary,
)


def product(name, price, link="", available=True):
    return Product(name=name, brand="X", cash_price=Decimal(price), link=link, available=available)


@pytest.fixture
def session():
    return ScanSession("https://www.climario.com.br", "ar-condicionado")


class TestAddProducts:
    def test_appends_in_order(self, session):
        added = session.add_products([product("A", "1", "https://x.com/a"), product("B", "2", "https://x.com/b")])
        assert added == 2
        assert [p.name for p in session.accumulated] == ["A", "B"]

    def test_first_seen_wins(self, session):
        session.add_products([product("First", "1", "https://x.com/a")])
        added = session.add_products([product("Second", "2", "https://x.com/a?skuId=9")])
        assert added == 0
        assert [p.name for p in session.accumulated] == ["First"]

    def test_duplicates_within_one_batch(self, session):
        session.add_products([product("A", "1", "https://x.com/a"), product("A2", "1", "https://x.com/a")])
        assert len(session.accumulated) == 1


class TestStatus:
    def test_running_has_no_status(self, session):
        assert session.status is None

    def test_exhausted_is_success(self, session):
        session.terminate(TerminationReason.EXHAUSTED)
        assert session.status is ScanStatus.SUCCESS

    def test_page_cap_is_partial(self, session):
        session.terminate(TerminationReason.PAGE_CAP_REACHED)
        assert session.status is ScanStatus.PARTIAL

    def test_cancelled_with_products_is_partial(self, session):
        session.add_products([product("A", "1")])
        session.terminate(TerminationReason.CANCELLED)
        assert session.status is ScanStatus.PARTIAL

    def test_cancelled_empty_is_failed(self, session):
        session.terminate(TerminationReason.CANCELLED)
        assert session.status is ScanStatus.FAILED

    def test_persistent_failure_empty_is_failed(self, session):
        session.terminate(TerminationReason.PERSISTENT_FAILURE, PersistentFailure(3, RelayExhausted("u")))
        assert session.status is ScanStatus.FAILED
        assert session.error_message.startswith("Persistent connection failure after 3 attempts")

    def test_persistent_failure_with_products_is_partial(self, session):
        session.add_products([product("A", "1")])
        session.terminate(TerminationReason.PERSISTENT_FAILURE, PersistentFailure(3))
        assert session.status is ScanStatus.PARTIAL

    def test_error_message_only_for_persistent_failure(self, session):
        session.last_error = RelayExhausted("u")
        session.terminate(TerminationReason.EXHAUSTED)
        assert session.error_message is None


class TestStopRequest:
    def test_request_stop(self, session):
        assert session.is_stop_requested() is False
        session.request_stop()
        assert session.is_stop_requested() is True


class TestCatalogSummary:
    def test_summary(self):
        stats = catalog_summary([
            product("A", "100.00"),
            product("B", "200.00", available=False),
            product("C", "0"),
        ])
        assert stats["total"] == 3
        assert stats["average_cash_price"] == Decimal("150.00")
        assert stats["lowest_cash_price"] == Decimal("100.00")
        assert stats["unavailable"] == 1

    def test_empty(self):
        stats = catalog_summary([])
        assert stats["total"] == 0
        assert stats["average_cash_price"] == Decimal("0.00")
        assert stats["lowest_cash_price"] is None


class TestSerialization:
    def test_session_to_dict(self, session):
        session.add_products([product("A", "1.50", "https://x.com/a")])
        session.page_index = 1
        session.terminate(TerminationReason.EXHAUSTED)
        data = session.to_dict()
        assert data["status"] == "success"
        assert data["termination_reason"] == "exhausted"
        assert data["pages_scanned"] == 1
        assert data["products"][0]["cash_price"] == "1.50"

    def test_running_session_to_dict(self, session):
        assert session.to_dict()["status"] == "running"

    def test_extraction_result_to_dict(self):
        result = ExtractionResult(status=ScanStatus.FAILED, error=SnapshotMissing())
        data = result.to_dict()
        assert data["status"] == "failed"
        assert data["error_message"] == "No page snapshot was supplied"
        assert data["error"]["error_code"] == "SNAPSHOT_MISSING"
