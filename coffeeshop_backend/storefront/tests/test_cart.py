# storefront/tests/test_cart.py

from decimal import Decimal

from django.test import SimpleTestCase

from products.services.pricing import VariantNotPricedError
from storefront.cart import Cart, change_due

LATTE = {
    "id": "p-latte",
    "name": "Latte",
    "productType": "drink",
    "prices": {
        "hot": {"general": 45, "teacher": 40, "student": 35},
        "iced": {"general": 50, "teacher": 45, "student": 40},
    },
}
CROISSANT = {
    "id": "p-croissant",
    "name": "Croissant",
    "productType": "snack",
    "prices": {"snack": {"general": 35, "teacher": 30, "student": 25}},
}


class CartTests(SimpleTestCase):
    """
    GUARANTEES:
    - quantity never drops below 1
    - total is the sum of line subtotals
    - switching customer class re-prices every line, quantities untouched
    """

    def test_add_resolves_price_for_active_class(self):
        cart = Cart(customer_class="teacher")
        line = cart.add(LATTE, "iced")

        self.assertEqual(line.applied_price, Decimal("45"))
        self.assertEqual(line.sweetness, "100%")
        self.assertEqual(line.selected_user_type, "teacher")

    def test_snack_has_no_sweetness(self):
        line = Cart().add(CROISSANT, "snack", sweetness="50%")
        self.assertEqual(line.sweetness, "-")

    def test_unknown_sweetness_is_rejected(self):
        with self.assertRaises(ValueError):
            Cart().add(LATTE, "hot", sweetness="75%")

    def test_unpriced_variant_cannot_be_added(self):
        cart = Cart()
        with self.assertRaises(VariantNotPricedError):
            cart.add(LATTE, "frappe")
        self.assertTrue(cart.is_empty)

    def test_cart_ids_are_unique(self):
        cart = Cart()
        ids = {cart.add(LATTE, "hot").cart_id for _ in range(50)}
        self.assertEqual(len(ids), 50)

    def test_quantity_floors_at_one(self):
        cart = Cart()
        line = cart.add(LATTE, "hot")

        cart.set_quantity(line.cart_id, 3)
        self.assertEqual(line.quantity, 4)

        cart.set_quantity(line.cart_id, -100)
        self.assertEqual(line.quantity, 1)
        self.assertEqual(len(cart), 1)

    def test_total_and_remove(self):
        cart = Cart()
        latte = cart.add(LATTE, "hot", quantity=2)
        cart.add(CROISSANT, "snack")

        self.assertEqual(cart.total(), Decimal("125"))

        cart.remove(latte.cart_id)
        self.assertEqual(cart.total(), Decimal("35"))

        cart.clear()
        self.assertEqual(cart.total(), Decimal("0"))

    def test_reprice_switches_every_line(self):
        cart = Cart(customer_class="general")
        hot = cart.add(LATTE, "hot", quantity=3)
        iced = cart.add(LATTE, "iced")
        snack = cart.add(CROISSANT, "snack")

        cart.reprice("student")

        self.assertEqual(
            [hot.applied_price, iced.applied_price, snack.applied_price],
            [Decimal("35"), Decimal("40"), Decimal("25")],
        )
        self.assertEqual(hot.quantity, 3)
        self.assertTrue(all(line.selected_user_type == "student" for line in cart))

    def test_reprice_prefers_fresh_catalog(self):
        cart = Cart()
        line = cart.add(LATTE, "hot")

        fresh = {**LATTE, "prices": {"hot": {"general": 60, "teacher": 55, "student": 50}}}
        cart.reprice("teacher", products=[fresh])

        self.assertEqual(line.applied_price, Decimal("55"))

    def test_snapshot_freezes_prices(self):
        cart = Cart()
        cart.add(LATTE, "iced", quantity=2)

        [item] = cart.snapshot()
        self.assertNotIn("prices", item)
        self.assertEqual(item["appliedPrice"], 50)
        self.assertEqual(item["quantity"], 2)
        self.assertEqual(item["selectedServingType"], "iced")


class ChangeDueTests(SimpleTestCase):
    def test_change_due(self):
        self.assertEqual(change_due(500, Decimal("130")), Decimal("370"))

    def test_short_payment_is_zero(self):
        self.assertEqual(change_due("100", 130), Decimal("0"))

    def test_unreadable_input_counts_as_zero(self):
        self.assertEqual(change_due("abc", 130), Decimal("0"))
        self.assertEqual(change_due(None, 0), Decimal("0"))
