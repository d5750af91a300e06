import pytest

from barflow.services import reporting_service, order_service, payment_service, catalog_service
from barflow.services.reporting_service import ReportError
from barflow.time_utils import utcnow


@pytest.fixture
def evening(db_session, regular):
    """Two paid orders (CASH, TAB) and one still open."""
    first = order_service.place_order(
        [{"name": "Mojito", "quantity": 2}, {"name": "Nachos", "quantity": 1}], "S1"
    ).order
    second = order_service.place_order([{"name": "Blonde Pint", "quantity": 3}], "S2").order
    order_service.place_order([{"name": "Mixed Board", "quantity": 1}], "T1")

    payment_service.settle(first.id, "CASH", first.total_cents)
    payment_service.settle(second.id, "TAB", second.total_cents, client_id=regular.id)
    return first, second


def test_sales_summary_counts_paid_orders_only(evening):
    summary = reporting_service.sales_summary()

    assert summary["order_count"] == 2
    assert summary["revenue_cents"] == 3200 + 2100
    assert summary["cost_cents"] == 1000 + 600
    assert summary["profit_cents"] == 3700
    assert summary["margin_pct"] == 69.8
    assert summary["by_payment_method"] == {
        "CASH": {"revenue_cents": 3200, "order_count": 1},
        "TAB": {"revenue_cents": 2100, "order_count": 1},
    }
    assert [item["name"] for item in summary["top_items"]] == ["Blonde Pint", "Mojito", "Nachos"]
    assert summary["top_items"][1] == {
        "name": "Mojito",
        "quantity": 2,
        "revenue_cents": 2000,
        "profit_cents": 1400,
    }


def test_cost_changes_do_not_rewrite_margins(evening, mojito):
    before = reporting_service.sales_summary()["profit_cents"]
    catalog_service.update_product(mojito.id, {"cost_price_cents": 1000})

    assert reporting_service.sales_summary()["profit_cents"] == before


def test_top_limit(evening):
    assert len(reporting_service.sales_summary(top=1)["top_items"]) == 1


def test_empty_range(evening):
    summary = reporting_service.sales_summary(start="2000-01-01T00:00:00Z", end="2000-01-02T00:00:00Z")

    assert summary["order_count"] == 0
    assert summary["revenue_cents"] == 0
    assert summary["margin_pct"] is None
    assert summary["by_payment_method"] == {}
    assert summary["start"] == "2000-01-01T00:00:00Z"


def test_invalid_range(db_session):
    with pytest.raises(ReportError):
        reporting_service.sales_summary(start="yesterday")
    with pytest.raises(ReportError):
        reporting_service.daily_sales(start="2026-02-01T00:00:00", end="2026-01-01T00:00:00")


def test_daily_sales(evening):
    report = reporting_service.daily_sales()

    assert report["rows"] == [
        {"day": utcnow().strftime("%Y-%m-%d"), "order_count": 2, "revenue_cents": 5300},
    ]
