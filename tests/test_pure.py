import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from sales.models import Product  # noqa: E402
from utils.pure import (  # noqa: E402
    clamp_discount,
    filter_products,
    format_money,
    generate_markdown_table,
    stock_status,
)


def product(name, inventory=10, threshold=None):
    return Product(id=name, name=name, price=1.0, inventory=inventory, min_threshold=threshold)


class PureTestCase(unittest.TestCase):
    def test_clamp_discount(self):
        self.assertEqual(clamp_discount(15), 15.0)
        self.assertEqual(clamp_discount("12.5"), 12.5)
        self.assertEqual(clamp_discount(-4), 0.0)
        self.assertEqual(clamp_discount("250"), 100.0)
        self.assertEqual(clamp_discount(""), 0.0)
        self.assertEqual(clamp_discount(None), 0.0)
        self.assertEqual(clamp_discount("abc"), 0.0)
        self.assertEqual(clamp_discount("nan"), 0.0)

    def test_filter_products(self):
        items = [product("Basmati Rice"), product("Rock Salt"), product("rice flour")]
        self.assertEqual(filter_products(items, "   "), items)
        self.assertEqual(
            [p.name for p in filter_products(items, "RICE")],
            ["Basmati Rice", "rice flour"],
        )
        self.assertEqual(filter_products(items, "sugar"), [])

    def test_stock_status(self):
        self.assertEqual(stock_status(product("a", 0)), ("Out of Stock", "danger"))
        self.assertEqual(stock_status(product("a", 5)), ("Low Stock", "danger"))
        self.assertEqual(stock_status(product("a", 10)), ("Medium", "warning"))
        self.assertEqual(stock_status(product("a", 11)), ("In Stock", "success"))
        # product threshold overrides the default of 10
        self.assertEqual(stock_status(product("a", 11, threshold=30)), ("Low Stock", "danger"))
        self.assertEqual(stock_status(product("a", 20, threshold=30)), ("Medium", "warning"))

    def test_format_money(self):
        self.assertEqual(format_money(1234.5), "₹1,234.50")
        self.assertEqual(format_money(0, symbol="$"), "$0.00")

    def test_markdown_table(self):
        md = generate_markdown_table(["Item", "Qty"], [["Tea", 2]], ["l", "r"])
        self.assertEqual(md, "| Item | Qty |\n| :--- | ---: |\n| Tea | 2 |")
        self.assertEqual(generate_markdown_table(["A"], []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [["1", "2"]], ["l"])

    def test_markdown_table_without_headers(self):
        md = generate_markdown_table(None, [["Key", "Value"], ["Role", "Cashier"]])
        self.assertEqual(md.splitlines()[0], "| Key | Value |")
        self.assertEqual(len(md.splitlines()), 3)


if __name__ == "__main__":
    unittest.main()
