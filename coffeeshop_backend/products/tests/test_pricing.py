# products/tests/test_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase

from backend.encoding import dump_json
from products.models import Product
from products.services.pricing import (
    UnknownCustomerClassError,
    VariantNotPricedError,
    get_starting_price,
    priced_variants,
    resolve_price,
)

ICED_ONLY = {
    "id": "p-iced",
    "name": "Iced Americano",
    "prices": {"iced": {"general": 45, "teacher": 40, "student": 35}},
}


class ResolvePriceTests(SimpleTestCase):
    """
    GUARANTEES:
    - The customer class picks the tier of the requested serving type
    - An unpriced serving type is rejected, never priced as 0
    """

    def test_tier_follows_customer_class(self):
        self.assertEqual(resolve_price(ICED_ONLY, "iced", "general"), Decimal("45"))
        self.assertEqual(resolve_price(ICED_ONLY, "iced", "teacher"), Decimal("40"))
        self.assertEqual(resolve_price(ICED_ONLY, "iced", "student"), Decimal("35"))

    def test_unpriced_variant_is_rejected(self):
        with self.assertRaises(VariantNotPricedError):
            resolve_price(ICED_ONLY, "hot", "student")

    def test_unknown_customer_class_is_rejected(self):
        with self.assertRaises(UnknownCustomerClassError):
            resolve_price(ICED_ONLY, "iced", "vip")

    def test_decimal_prices_are_kept_exactly(self):
        product = {"prices": {"hot": {"general": 42.5, "teacher": "40.25", "student": 30}}}
        self.assertEqual(resolve_price(product, "hot", "general"), Decimal("42.5"))
        self.assertEqual(resolve_price(product, "hot", "teacher"), Decimal("40.25"))

    def test_missing_tier_counts_as_unpriced(self):
        product = {"prices": {"hot": {"general": 40}}}
        with self.assertRaises(VariantNotPricedError):
            resolve_price(product, "hot", "student")

    def test_model_instance_reads_its_json_cell(self):
        product = Product(id="p-1", name="Latte", prices=dump_json(ICED_ONLY["prices"]))
        self.assertEqual(resolve_price(product, "iced", "teacher"), Decimal("40"))

    def test_unreadable_price_cell_prices_nothing(self):
        product = Product(id="p-2", name="Broken", prices="{not json")
        self.assertEqual(priced_variants(product), [])
        with self.assertRaises(VariantNotPricedError):
            resolve_price(product, "hot", "general")


class StartingPriceTests(SimpleTestCase):
    def test_starting_price_is_cheapest_student_tier(self):
        self.assertEqual(get_starting_price(ICED_ONLY), Decimal("35"))

    def test_starting_price_across_variants(self):
        product = {
            "prices": {
                "hot": {"general": 40, "teacher": 35, "student": 30},
                "frappe": {"general": 55, "teacher": 50, "student": 45},
            }
        }
        self.assertEqual(get_starting_price(product), Decimal("30"))

    def test_no_priced_variant_starts_at_zero(self):
        self.assertEqual(get_starting_price({"prices": {}}), Decimal("0"))
