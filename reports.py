"""
Reporting aggregations over serialized expenses (see Expense.to_dict)

These functions are pure: they never touch the database and never mutate their input.
"""
from decimal import Decimal
from typing import Dict, Iterable, List

import pandas as pd

CSV_COLUMNS = ["id", "created_at", "category", "money", "note"]


def total_money(expenses: Iterable[Dict]) -> Decimal:
    """Exact sum of the ``money`` fields; an empty input sums to 0"""
    return sum((Decimal(item["money"]) for item in expenses), Decimal("0.00"))


def category_key(expense: Dict):
    """Grouping key: the category id, or None for uncategorized/unresolved expenses"""
    category = expense.get("category")
    if not category:
        return None
    return category.get("id")


def group_by_category(expenses: Iterable[Dict]) -> List[Dict]:
    """
    Merge expenses into one record per category

    ``money`` is summed over the group. Every other field comes from the last
    expense seen for that category. Groups are returned in the order their
    category was first seen.
    """
    groups = {}
    for item in expenses:
        key = category_key(item)
        previous = groups.get(key)
        if previous is None:
            groups[key] = dict(item)
        else:
            # dict keeps the key's original position, so first-seen order survives
            groups[key] = {**item, "money": Decimal(previous["money"]) + Decimal(item["money"])}
    return list(groups.values())


def expenses_to_csv(expenses: Iterable[Dict]) -> str:
    """Render serialized expenses as CSV text for download"""
    rows = [
        {
            "id": item["id"],
            "created_at": item["created_at"],
            "category": item["category"]["name"] if item.get("category") else "",
            "money": str(item["money"]),
            "note": item.get("note") or "",
        }
        for item in expenses
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False)
