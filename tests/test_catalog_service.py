import datetime
from unittest.mock import MagicMock

import pytest
import requests

from boluxiones.models.catalog import CatalogStatus
from boluxiones.services.catalog_service import (
    CatalogService, fallback_index, rows_to_groupings, select_rows_for_date
)


def puzzle_rows(date, prefix):
    rows = []
    for difficulty in (3, 1, 4, 2):
        rows.append({
            "date": f" {date} ",
            "difficulty": str(difficulty),
            "group": f"{prefix}-group-{difficulty}",
            **{f"word{i}": f"{prefix}{difficulty}{i}" for i in range(1, 5)},
        })
    return rows


SHEET = (puzzle_rows("2024-01-01", "a") + puzzle_rows("2024-01-02", "b")
         + puzzle_rows("2024-01-03", "c") + puzzle_rows("2024-01-04", "d")[:3])


def service_returning(payload=None, error=None):
    http = MagicMock()
    if error is not None:
        http.get.side_effect = error
    else:
        http.get.return_value.json.return_value = payload
    return CatalogService("https://example.test/sheet", timeout=5, session=http), http


def test_exact_date_rows_are_used():
    rows = select_rows_for_date(SHEET, datetime.date(2024, 1, 2))
    assert {row["group"] for row in rows} == {f"b-group-{d}" for d in range(1, 5)}


def test_fallback_is_deterministic_by_day_offset():
    day = datetime.date(2024, 6, 1)
    valid_dates = ["2024-01-01", "2024-01-02", "2024-01-03"]
    expected = valid_dates[(day - datetime.date(2022, 2, 14)).days % 3]

    rows = select_rows_for_date(SHEET, day)
    assert rows[0]["date"].strip() == expected
    assert select_rows_for_date(SHEET, day) == rows


def test_incomplete_date_falls_back():
    rows = select_rows_for_date(SHEET, datetime.date(2024, 1, 4))
    assert len(rows) == 4
    assert rows[0]["date"].strip() != "2024-01-04"


def test_fallback_index():
    assert fallback_index(datetime.date(2022, 2, 14), 5) == 0
    assert fallback_index(datetime.date(2022, 2, 20), 5) == 1


def test_no_valid_dates():
    assert select_rows_for_date(SHEET[12:], datetime.date(2024, 1, 4)) is None


def test_rows_are_sorted_by_difficulty():
    groupings = rows_to_groupings(puzzle_rows("2024-01-01", "a"))
    assert [g.difficulty for g in groupings] == [1, 2, 3, 4]
    assert groupings[0].words == ("a11", "a12", "a13", "a14")


def test_load_success():
    service, http = service_returning(SHEET)
    catalog = service.load(datetime.date(2024, 1, 3))
    assert catalog.status is CatalogStatus.LOADED
    assert catalog.source_date == "2024-01-03"
    assert [g.group for g in catalog.groupings] == [f"c-group-{d}" for d in range(1, 5)]
    http.get.assert_called_once_with("https://example.test/sheet", timeout=5)


def test_load_network_failure():
    service, _ = service_returning(error=requests.ConnectionError("down"))
    catalog = service.load(datetime.date(2024, 1, 3))
    assert catalog.status is CatalogStatus.FAILED
    assert catalog.groupings == ()


def test_load_malformed_payload():
    service, _ = service_returning({"error": "not a list"})
    assert service.load(datetime.date(2024, 1, 3)).status is CatalogStatus.FAILED


def test_load_bad_difficulty():
    rows = puzzle_rows("2024-01-01", "a")
    rows[0]["difficulty"] = "hard"
    service, _ = service_returning(rows)
    assert service.load(datetime.date(2024, 1, 1)).status is CatalogStatus.FAILED


def test_load_duplicate_words():
    rows = puzzle_rows("2024-01-01", "a")
    rows[1]["word1"] = rows[0]["word1"]
    service, _ = service_returning(rows)
    assert service.load(datetime.date(2024, 1, 1)).status is CatalogStatus.FAILED


def test_load_blank_group_label():
    rows = puzzle_rows("2024-01-01", "a")
    rows[3]["group"] = " "
    service, _ = service_returning(rows)
    assert service.load(datetime.date(2024, 1, 1)).status is CatalogStatus.FAILED


def test_load_blank_word():
    rows = puzzle_rows("2024-01-01", "a")
    rows[2]["word4"] = ""
    service, _ = service_returning(rows)
    assert service.load(datetime.date(2024, 1, 1)).status is CatalogStatus.FAILED


def test_duplicate_group_labels_are_rejected():
    rows = puzzle_rows("2024-01-01", "a")
    rows[1]["group"] = rows[0]["group"]
    with pytest.raises(ValueError):
        rows_to_groupings(rows)
