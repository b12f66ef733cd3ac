# SPDX-License-Identifier: MIT

from __future__ import annotations

import pendulum
import pytest
import typer

from chronicle.terminal import parse


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("3", [3]),
        ("1,4,7", [1, 4, 7]),
        ("2-5", [2, 3, 4, 5]),
        ("5, 1,3-4, 3", [1, 3, 4, 5]),
    ],
)
def test_parse_id_list(value: str, expected: list[int]) -> None:
    assert parse.parse_id_list(value) == expected


@pytest.mark.parametrize("value", ["", " , ", "x", "5-2", "1-2-3"])
def test_parse_id_list_rejects(value: str) -> None:
    with pytest.raises(typer.BadParameter):
        parse.parse_id_list(value)


def test_parse_date_forms() -> None:
    today = pendulum.today("local").date()

    assert parse.parse_date(None) is None
    assert parse.parse_date("2024-03-09") == pendulum.date(2024, 3, 9)
    assert parse.parse_date("today") == today
    assert parse.parse_date("Y") == today.subtract(days=1)
    assert parse.parse_date("-2") == today.subtract(days=2)


@pytest.mark.parametrize("value", ["2024-13-01", "03/09/2024", "someday"])
def test_parse_date_rejects(value: str) -> None:
    with pytest.raises(typer.BadParameter):
        parse.parse_date(value)


def test_parse_month() -> None:
    assert parse.parse_month("2024-2") == pendulum.date(2024, 2, 1)
    with pytest.raises(typer.BadParameter):
        parse.parse_month("2024-00")
    with pytest.raises(typer.BadParameter):
        parse.parse_month("March")


def test_parse_entry_type_normalizes() -> None:
    assert parse.parse_entry_type(" Habit ") == "habit"
    with pytest.raises(typer.BadParameter):
        parse.parse_entry_type("mood")
