from typing import Iterable, List, Literal, Optional, Tuple

from sales.models import Product
from utils import config


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of strings.
        aligns: List of alignments ('l', 'c', 'r') for each column.
                Defaults to all center ('c').

    Returns:
        str: Markdown formatted table.
    """
    if not rows:
        return ""

    # If no headers, take the first row as header and remove it from rows
    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = list(map(str, headers))
    rows = [list(map(str, row)) for row in rows]

    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {
        "l": ":---",
        "c": ":---:",
        "r": "---:",
    }

    header_line = "| " + " | ".join(headers) + " |"
    align_line = "| " + " | ".join(align_map[a] for a in aligns) + " |"
    row_lines = ["| " + " | ".join(row) + " |" for row in rows]

    return "\n".join([header_line, align_line, *row_lines])


def clamp_discount(value) -> float:
    """Parse a discount percentage typed by the operator, clamped to [0, 100].

    Blank or unparsable input counts as no discount.
    """
    try:
        pct = float(value)
    except (TypeError, ValueError):
        return 0.0
    if pct != pct:  # nan
        return 0.0
    return min(max(pct, 0.0), 100.0)


def filter_products(products: Iterable[Product], query: str) -> List[Product]:
    """Case-insensitive substring match on the product name."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(products)
    return [p for p in products if needle in p.name.lower()]


StockLevel = Literal["success", "warning", "danger"]


def stock_status(product: Product) -> Tuple[str, StockLevel]:
    """Label and severity for a product's stock level."""
    threshold = product.min_threshold or config.DEFAULT_MIN_THRESHOLD
    if product.inventory <= 0:
        return "Out of Stock", "danger"
    if product.inventory <= threshold * 0.5:
        return "Low Stock", "danger"
    if product.inventory <= threshold:
        return "Medium", "warning"
    return "In Stock", "success"


def format_money(amount: float, symbol: str = "₹") -> str:
    return f"{symbol}{amount:,.2f}"
