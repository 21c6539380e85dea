from __future__ import annotations

from index_creator.models.row_data import RawRow
from index_creator.services.expansion import expand_flipped_rows, expand_rows, expand_split_rows


def _row(term="", sub_term="", notes="", book="", page="", ignored=False, line_number=0) -> RawRow:
    return RawRow(
        values={"term": term, "sub-term": sub_term, "notes": notes, "book": book, "page": page},
        ignored=ignored,
        line_number=line_number,
    )


def _pairs(rows) -> list[tuple[str, str]]:
    return [(r.term, r.sub_term) for r in rows]


def test_flip_marker_on_term():
    rows = expand_flipped_rows([_row("A<>", "X", book="1", page="5")])
    assert _pairs(rows) == [("A", "X"), ("X", "A")]
    assert all(r.get("book") == "1" and r.get("page") == "5" for r in rows)


def test_flip_marker_on_both_fields():
    rows = expand_flipped_rows([_row("A<>B", "X<>Y")])
    assert _pairs(rows) == [("AB", "XY"), ("XY", "AB")]


def test_rows_without_flip_marker_pass_through():
    row = _row("A", "X")
    assert expand_flipped_rows([row]) == (row,)


def test_flip_copies_ignored_flag():
    rows = expand_flipped_rows([_row("?A<>", "X", ignored=True)])
    assert [r.ignored for r in rows] == [True, True]


def test_split_on_one_field():
    rows = expand_split_rows([_row("A && B", "X", book="1", page="5")])
    assert _pairs(rows) == [("A", "X"), ("B", "X")]
    assert {r.get("page") for r in rows} == {"5"}


def test_split_cartesian_product():
    rows = expand_split_rows([_row("A && B", "X && Y")])
    assert _pairs(rows) == [("A", "X"), ("A", "Y"), ("B", "X"), ("B", "Y")]


def test_split_book_and_page():
    rows = expand_split_rows([_row("nmap", book="1&&2", page="4 && 9")])
    assert [(r.get("book"), r.get("page")) for r in rows] == [("1", "4"), ("1", "9"), ("2", "4"), ("2", "9")]


def test_split_keeps_flags_and_line_number():
    rows = expand_split_rows([_row("?A && B", ignored=True, line_number=7)])
    assert [(r.ignored, r.line_number) for r in rows] == [(True, 7), (True, 7)]


def test_flip_then_split():
    rows = expand_rows([_row("A<>", "X && Y")])
    assert _pairs(rows) == [("A", "X"), ("A", "Y"), ("X", "A"), ("Y", "A")]
