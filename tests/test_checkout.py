import json
import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

import httpx  # noqa: E402

from api.client import ApiError  # noqa: E402
from sales.cart import Cart  # noqa: E402
from sales.checkout import CheckoutRejected, build_sale, submit_sale  # noqa: E402
from sales.models import Product  # noqa: E402


class CheckoutTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.posted = []
        self.status = 200

        def handler(request: httpx.Request) -> httpx.Response:
            self.posted.append(json.loads(request.content))
            if self.status >= 400:
                return httpx.Response(self.status, json={"message": "Insufficient stock"})
            return httpx.Response(200, json={"success": True, "result": {"_id": "sale1"}})

        self.client = httpx.AsyncClient(
            base_url="http://api.test", transport=httpx.MockTransport(handler)
        )
        self.cart = Cart()
        self.cart.add_item(Product(id="p1", name="Tea", price=100.0, inventory=2))
        self.cart.add_item(Product(id="p1", name="Tea", price=100.0, inventory=2))
        self.cart.add_item(Product(id="p2", name="Sugar", price=45.0, inventory=9))

    async def asyncTearDown(self):
        await self.client.aclose()

    async def test_successful_sale_clears_cart(self):
        result = await submit_sale(self.client, self.cart, "Ravi", "ravi@example.com", 10)
        self.assertEqual(result, {"_id": "sale1"})
        self.assertTrue(self.cart.is_empty)
        self.assertEqual(
            self.posted,
            [
                {
                    "customer": "Ravi",
                    "customerEmail": "ravi@example.com",
                    "discount": 10.0,
                    "products": [
                        {"productId": "p1", "quantity": 2},
                        {"productId": "p2", "quantity": 1},
                    ],
                }
            ],
        )

    async def test_failed_sale_keeps_cart(self):
        self.status = 400
        with self.assertRaises(ApiError):
            await submit_sale(self.client, self.cart, "Ravi", "ravi@example.com", 0)
        self.assertEqual(len(self.cart), 2)
        self.assertEqual(self.cart.get("p1").quantity, 2)

    async def test_missing_customer_details_rejected(self):
        with self.assertRaises(CheckoutRejected):
            await submit_sale(self.client, self.cart, "  ", "ravi@example.com", 0)
        with self.assertRaises(CheckoutRejected):
            await submit_sale(self.client, self.cart, "Ravi", "", 0)
        self.assertEqual(self.posted, [])
        self.assertEqual(len(self.cart), 2)

    async def test_empty_cart_rejected(self):
        with self.assertRaises(CheckoutRejected):
            await submit_sale(self.client, Cart(), "Ravi", "ravi@example.com", 0)
        self.assertEqual(self.posted, [])

    def test_build_sale_trims_customer(self):
        sale = build_sale(self.cart, " Ravi ", " ravi@example.com ", "5")
        self.assertEqual(sale.customer, "Ravi")
        self.assertEqual(sale.customer_email, "ravi@example.com")
        self.assertEqual(sale.discount, 5.0)


if __name__ == "__main__":
    unittest.main()
