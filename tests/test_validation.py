import uuid

import pytest

from storefront.errors import ValidationError
from storefront.identifiers import is_valid_id, new_id, parse_id
from storefront.schemas import LineItem
from storefront.validation import coerce_quantity, merge_line_items, parse_line_items, strict_quantity


def test_new_ids_are_valid():
    assert is_valid_id(new_id())


def test_parse_id_normalises_hyphenated_form():
    raw = uuid.uuid4()
    assert parse_id(str(raw)) == raw.hex


@pytest.mark.parametrize("bad", [None, "", "abc", "123", 42, "zz" * 16])
def test_parse_id_rejects_garbage(bad):
    with pytest.raises(ValidationError):
        parse_id(bad)


@pytest.mark.parametrize("raw, expected", [(3, 3), ("3", 3), (" 7 ", 7), (2.0, 2), ("4.0", 4)])
def test_coerce_quantity(raw, expected):
    assert coerce_quantity(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", 0, -1, "-2", 2.5, True, None, "nan"])
def test_coerce_quantity_rejects(raw):
    with pytest.raises(ValidationError):
        coerce_quantity(raw)


@pytest.mark.parametrize("raw", ["3", 0, -3, 1.5, False, None])
def test_strict_quantity_rejects(raw):
    with pytest.raises(ValidationError):
        strict_quantity(raw)


def test_merge_line_items_keeps_first_seen_order():
    a, b = new_id(), new_id()
    merged = merge_line_items([LineItem(id=a, quantity=1), LineItem(id=b, quantity=2), LineItem(id=a, quantity=4)])
    assert merged == [LineItem(id=a, quantity=5), LineItem(id=b, quantity=2)]


def test_parse_line_items_requires_a_list():
    with pytest.raises(ValidationError):
        parse_line_items({"id": new_id(), "quantity": 1})
    assert parse_line_items([]) == []
