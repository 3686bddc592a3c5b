# Tests for the pure reporting aggregations

from decimal import Decimal

from reports import expenses_to_csv, group_by_category, total_money

FOOD = {"id": 1, "name": "Food"}
RENT = {"id": 2, "name": "Rent"}


def expense(id, category, money, created_at="2025-11-01", note=None):
    return {
        "id": id,
        "user": 7,
        "category": category,
        "money": Decimal(money),
        "created_at": created_at,
        "note": note,
    }


def test_total_of_nothing_is_zero():
    assert total_money([]) == 0


def test_total_is_exact_for_cents():
    items = [expense(i, FOOD, "0.10") for i in range(10)]
    assert total_money(items) == Decimal("1.00")


def test_total_is_order_independent_and_additive():
    first = [expense(1, FOOD, "12.30"), expense(2, RENT, "700.00")]
    second = [expense(3, FOOD, "0.05"), expense(4, None, "-4.50")]
    assert total_money(first) == total_money(list(reversed(first)))
    assert total_money(first + second) == total_money(first) + total_money(second)


def test_monthly_example_groups_in_first_seen_order():
    x = {"id": 10, "name": "X"}
    y = {"id": 20, "name": "Y"}
    items = [
        expense(1, x, "100", "2025-11-03"),
        expense(2, y, "30", "2025-11-15"),
        expense(3, x, "50", "2025-11-20"),
    ]

    grouped = group_by_category(items)

    assert [g["category"]["id"] for g in grouped] == [10, 20]
    assert [g["money"] for g in grouped] == [Decimal("150"), Decimal("30")]
    assert total_money(items) == Decimal("180")


def test_group_keeps_last_record_fields():
    items = [
        expense(1, FOOD, "5.00", "2025-11-01", note="first"),
        expense(2, FOOD, "7.50", "2025-11-09", note="last"),
    ]

    (group,) = group_by_category(items)

    assert group["money"] == Decimal("12.50")
    assert group["id"] == 2
    assert group["note"] == "last"
    assert group["created_at"] == "2025-11-09"


def test_group_key_is_category_identity_not_name():
    twin = {"id": 3, "name": "Food"}
    grouped = group_by_category([expense(1, FOOD, "1"), expense(2, twin, "2")])
    assert len(grouped) == 2


def test_uncategorized_expenses_share_a_group():
    items = [expense(1, None, "3"), expense(2, FOOD, "4"), expense(3, None, "5")]

    grouped = group_by_category(items)

    assert len(grouped) == 2
    assert grouped[0]["category"] is None
    assert grouped[0]["money"] == Decimal("8")


def test_group_sums_match_total_and_input_is_untouched():
    items = [expense(1, FOOD, "1.25"), expense(2, RENT, "2.50"), expense(3, FOOD, "3.75")]

    grouped = group_by_category(items)

    assert len(grouped) == len({item["category"]["id"] for item in items})
    assert total_money(grouped) == total_money(items)
    assert items[0]["money"] == Decimal("1.25")


def test_csv_export_has_header_and_rows():
    csv_text = expenses_to_csv([
        expense(1, FOOD, "12.50", "2025-11-02", note="lunch"),
        expense(2, None, "3.00", "2025-11-03"),
    ])

    lines = csv_text.strip().splitlines()
    assert lines[0] == "id,created_at,category,money,note"
    assert lines[1] == "1,2025-11-02,Food,12.50,lunch"
    assert lines[2] == "2,2025-11-03,,3.00,"


def test_csv_export_of_empty_month_is_header_only():
    assert expenses_to_csv([]).strip() == "id,created_at,category,money,note"
