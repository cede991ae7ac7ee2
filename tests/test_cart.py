import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from sales.cart import Cart, compute_totals  # noqa: E402
from sales.models import CartSignal, LineItem, Product  # noqa: E402


def product(pid, price=10.0, stock=5, name=None):
    return Product(id=pid, name=name or f"Product {pid}", price=price, inventory=stock)


class CartTestCase(unittest.TestCase):
    def setUp(self):
        self.cart = Cart()

    # ---------- add_item ----------

    def test_add_new_item_starts_at_one(self):
        self.assertEqual(self.cart.add_item(product("p1", stock=3)), CartSignal.OK)
        item = self.cart.get("p1")
        self.assertEqual(item.quantity, 1)
        self.assertEqual(item.max_stock, 3)
        self.assertEqual(item.product_name, "Product p1")

    def test_add_existing_item_increments_without_duplicating(self):
        p1 = product("p1", stock=3)
        self.cart.add_item(p1)
        self.cart.add_item(p1)
        self.cart.add_item(product("p2"))
        self.assertEqual(len(self.cart), 2)
        self.assertEqual(self.cart.get("p1").quantity, 2)
        self.assertEqual([i.product_id for i in self.cart], ["p1", "p2"])

    def test_add_past_stock_is_rejected(self):
        p1 = product("p1", stock=2)
        self.cart.add_item(p1)
        self.cart.add_item(p1)
        self.assertEqual(self.cart.add_item(p1), CartSignal.STOCK_EXCEEDED)
        self.assertEqual(self.cart.get("p1").quantity, 2)

    def test_add_zero_stock_product_is_rejected(self):
        self.cart.add_item(product("p1", price=100, stock=2))
        signal = self.cart.add_item(product("p2", price=50, stock=0))
        self.assertEqual(signal, CartSignal.OUT_OF_STOCK)
        self.assertTrue(signal.rejected)
        self.assertEqual([i.product_id for i in self.cart], ["p1"])
        self.assertNotIn("p2", self.cart)

    def test_remove_then_add_starts_over(self):
        p1 = product("p1", stock=5)
        for _ in range(3):
            self.cart.add_item(p1)
        self.assertTrue(self.cart.remove_item("p1"))
        self.cart.add_item(p1)
        self.assertEqual(self.cart.get("p1").quantity, 1)

    # ---------- set_quantity ----------

    def test_set_quantity_within_stock(self):
        self.cart.add_item(product("p1", stock=4))
        self.assertEqual(self.cart.set_quantity("p1", 4), CartSignal.OK)
        self.assertEqual(self.cart.get("p1").quantity, 4)

    def test_set_quantity_above_stock_is_rejected(self):
        p1 = product("p1", price=100, stock=2)
        self.cart.add_item(p1)
        self.cart.add_item(p1)
        self.assertEqual(self.cart.set_quantity("p1", 5), CartSignal.STOCK_EXCEEDED)
        self.assertEqual(self.cart.get("p1").quantity, 2)

    def test_set_quantity_below_one_removes(self):
        self.cart.add_item(product("p1"))
        self.assertEqual(self.cart.set_quantity("p1", 0), CartSignal.REMOVED)
        self.assertTrue(self.cart.is_empty)
        self.cart.add_item(product("p2"))
        self.assertEqual(self.cart.set_quantity("p2", -3), CartSignal.REMOVED)
        self.assertNotIn("p2", self.cart)

    def test_set_quantity_for_missing_product(self):
        self.assertEqual(self.cart.set_quantity("nope", 2), CartSignal.NOT_IN_CART)
        self.assertEqual(self.cart.set_quantity("nope", 0), CartSignal.REMOVED)
        self.assertTrue(self.cart.is_empty)

    def test_quantities_stay_within_bounds(self):
        p1, p2 = product("p1", stock=3), product("p2", stock=1)
        steps = [
            lambda: self.cart.add_item(p1),
            lambda: self.cart.add_item(p2),
            lambda: self.cart.add_item(p2),
            lambda: self.cart.set_quantity("p1", 7),
            lambda: self.cart.set_quantity("p1", 3),
            lambda: self.cart.add_item(p1),
            lambda: self.cart.set_quantity("p2", 0),
            lambda: self.cart.add_item(p2),
        ]
        for step in steps:
            step()
            for item in self.cart:
                self.assertGreaterEqual(item.quantity, 1)
                self.assertLessEqual(item.quantity, item.max_stock)
        self.assertEqual(self.cart.get("p1").quantity, 3)
        self.assertEqual(self.cart.get("p2").quantity, 1)

    # ---------- remove / clear ----------

    def test_remove_missing_is_noop(self):
        self.cart.add_item(product("p1"))
        self.assertFalse(self.cart.remove_item("p9"))
        self.assertEqual(len(self.cart), 1)

    def test_clear(self):
        self.cart.add_item(product("p1"))
        self.cart.add_item(product("p2"))
        self.cart.clear()
        self.assertTrue(self.cart.is_empty)
        self.assertEqual(self.cart.items, ())

    # ---------- totals ----------

    def test_totals_with_discount(self):
        p1 = product("p1", price=100, stock=2)
        self.cart.add_item(p1)
        self.cart.add_item(p1)
        totals = self.cart.compute_totals(10)
        self.assertEqual(totals.subtotal, 200)
        self.assertEqual(totals.discount_amount, 20)
        self.assertEqual(totals.total, 180)

    def test_totals_are_pure(self):
        self.cart.add_item(product("p1", price=19.99, stock=9))
        self.cart.set_quantity("p1", 3)
        self.cart.add_item(product("p2", price=5.5))
        first = self.cart.compute_totals(12.5)
        second = self.cart.compute_totals(12.5)
        self.assertEqual(first, second)
        self.assertEqual(first.total, first.subtotal - first.discount_amount)
        self.assertEqual(first.discount_amount, first.subtotal * 12.5 / 100)
        self.assertEqual(self.cart.get("p1").quantity, 3)

    def test_totals_of_empty_cart(self):
        totals = self.cart.compute_totals(50)
        self.assertEqual((totals.subtotal, totals.discount_amount, totals.total), (0, 0, 0))

    def test_module_level_compute_totals(self):
        items = [
            LineItem("a", "A", 2.0, 3, 5),
            LineItem("b", "B", 4.0, 1, 1),
        ]
        totals = compute_totals(items, 0)
        self.assertEqual(totals.subtotal, 10.0)
        self.assertEqual(totals.total, 10.0)

    def test_to_sale_lines(self):
        self.cart.add_item(product("p1", stock=4))
        self.cart.set_quantity("p1", 3)
        self.cart.add_item(product("p2"))
        lines = self.cart.to_sale_lines()
        self.assertEqual([(l.product_id, l.quantity) for l in lines], [("p1", 3), ("p2", 1)])


if __name__ == "__main__":
    unittest.main()
