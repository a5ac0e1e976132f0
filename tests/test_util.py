from __future__ import annotations

import pytest

from jdindex.util import (
    AreaNumber, CategoryNumber, IDNumber, Level, format_folder_name, is_valid_label,
    parse_folder_name, parse_number, parse_query,
)


@pytest.mark.parametrize(
    ("name", "level", "expected"),
    [
        ("10-19 Admin", Level.AREA, (AreaNumber(10, 19), "Admin")),
        ("20–29 Family", Level.AREA, (AreaNumber(20, 29), "Family")),
        ("11 Finance", Level.CATEGORY, (CategoryNumber(11), "Finance")),
        ("11 2020 taxes", Level.CATEGORY, (CategoryNumber(11), "2020 taxes")),
        ("11.01 Taxes", Level.ID, (IDNumber(11, 1), "Taxes")),
        ("11.01-Taxes", Level.ID, (IDNumber(11, 1), "Taxes")),
        ("11.01 - Taxes", Level.ID, (IDNumber(11, 1), "Taxes")),
        ("20_good_testing", Level.CATEGORY, (CategoryNumber(20), "good_testing")),
        ("26.00", Level.ID, (IDNumber(26, 0), "")),
        ("26.00.md", Level.ID, (IDNumber(26, 0), "md")),
    ],
)
def test_parse_folder_name_accepts_conventional_names(name, level, expected) -> None:
    assert parse_folder_name(name, level) == expected


@pytest.mark.parametrize(
    ("name", "level"),
    [
        ("Misc", Level.CATEGORY),
        ("11Finance", Level.CATEGORY),
        ("110 Stuff", Level.CATEGORY),
        ("11.01 Taxes", Level.CATEGORY),
        ("10-19 Admin", Level.CATEGORY),
        ("10-19Admin", Level.AREA),
        ("11 Finance", Level.ID),
        ("11.01.02 Nested", Level.ID),
        ("1.01 Short", Level.ID),
    ],
)
def test_parse_folder_name_rejects_other_names(name, level) -> None:
    assert parse_folder_name(name, level) is None


@pytest.mark.parametrize(
    ("number", "label"),
    [
        (AreaNumber(0, 9), "System"),
        (AreaNumber(90, 99), "Archive – old"),
        (CategoryNumber(0), "Index"),
        (CategoryNumber(47), "Recipes & menus"),
        (IDNumber(11, 0), ""),
        (IDNumber(11, 99), "Last one"),
        (IDNumber(3, 7), "Scan 2024.pdf"),
    ],
)
def test_format_then_parse_gives_back_number_and_label(number, label) -> None:
    assert is_valid_label(label)
    assert parse_folder_name(format_folder_name(number, label), number.level) == (number, label)


def test_format_folder_name() -> None:
    assert format_folder_name(IDNumber(11, 4), "Insurance") == "11.04 Insurance"
    assert format_folder_name(CategoryNumber(5), "") == "05"
    assert str(AreaNumber(10, 19)) == "10-19"


def test_parse_query_picks_the_level_from_the_shape() -> None:
    assert parse_query("11.04") == IDNumber(11, 4)
    assert parse_query(" 11 ") == CategoryNumber(11)
    assert parse_query("10-19") == AreaNumber(10, 19)
    assert parse_query("eleven") is None
    assert parse_query("11.4") is None


def test_parse_number_is_level_specific() -> None:
    assert parse_number("11", Level.CATEGORY) == CategoryNumber(11)
    assert parse_number("11", Level.ID) is None
    assert parse_number("11.01 Taxes", Level.ID) is None


def test_numbers_are_two_digit() -> None:
    with pytest.raises(ValueError):
        CategoryNumber(100)
    with pytest.raises(ValueError):
        IDNumber(11, -1)


def test_area_span() -> None:
    area = AreaNumber(10, 19)
    assert area.is_aligned
    assert area.contains(11)
    assert not area.contains(25)
    assert not AreaNumber(10, 15).is_aligned
    assert CategoryNumber(47).area == AreaNumber(40, 49)


def test_numbers_order_numerically() -> None:
    assert sorted([IDNumber(12, 1), IDNumber(11, 10), IDNumber(11, 2)]) == [
        IDNumber(11, 2), IDNumber(11, 10), IDNumber(12, 1),
    ]


def test_is_valid_label() -> None:
    assert is_valid_label("Taxes")
    assert is_valid_label("")
    assert not is_valid_label(" Taxes")
    assert not is_valid_label("-Taxes")
