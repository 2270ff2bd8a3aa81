"""
Tests for shipment cost and hybrid tracking ids.
"""

from decimal import Decimal

from catalog_engines.engines.pricing import CategoryRate
from catalog_engines.engines.shipping import (
    CommuneRates,
    calculate_shipping,
    generate_hybrid_tracking_id,
)


class TestCalculateShipping:
    """Tests for landed shipping cost."""

    def test_full_breakdown(self):
        """Test every fee contributes to the total."""
        result = calculate_shipping(
            weight_grams=Decimal("1000"),
            reference_price=Decimal("100"),
            rates={"china_usa_rate_per_kg": Decimal("10"), "default_insurance_percent": Decimal("2")},
            commune=CommuneRates(
                rate_per_lb=Decimal("2"),
                extra_department_fee=Decimal("1"),
                delivery_fee=Decimal("3"),
                operational_fee=Decimal("0.5"),
            ),
            category_rate=CategoryRate(category_id="c1", fixed_fee=Decimal("2"), percentage_fee=Decimal("5")),
        )

        assert result.weight_kg == Decimal("1")
        assert result.weight_lb == Decimal("2.20462")
        assert result.china_usa_cost == Decimal("10")
        assert result.usa_destination_cost == Decimal("4.40924")
        assert result.category_percentage_fee == Decimal("5")
        assert result.insurance_cost == Decimal("2")
        assert result.total_shipping_cost == Decimal("27.90924")
        assert result.final_price == Decimal("127.90924")

    def test_without_commune_or_category(self):
        """Test missing commune and category contribute nothing."""
        result = calculate_shipping(
            weight_grams=Decimal("500"),
            reference_price=Decimal("50"),
            rates={"china_usa_rate_per_kg": Decimal("8")},
        )

        assert result.china_usa_cost == Decimal("4")
        assert result.usa_destination_cost == Decimal("0")
        assert result.insurance_cost == Decimal("0")
        assert result.total_shipping_cost == Decimal("4")
        assert result.final_price == Decimal("54")

    def test_no_rates(self):
        result = calculate_shipping(weight_grams=Decimal("500"), reference_price=Decimal("50"))
        assert result.total_shipping_cost == Decimal("0")


class TestHybridTrackingId:
    """Tests for tracking id generation."""

    def test_default_point_and_padding(self):
        assert generate_hybrid_tracking_id("ou", "pap", None, 3, "YT123") == "OU-PAP-XX-03-YT123"

    def test_point_code_upper_cased(self):
        assert generate_hybrid_tracking_id("OU", "PAP", "p1", 12, "yt9") == "OU-PAP-P1-12-yt9"
