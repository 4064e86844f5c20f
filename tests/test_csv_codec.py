import textwrap

import csv_codec


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_parse_trims_header_and_cells():
    text = _dedent(
        """
        service , instrument,rate
          S1,  I1 , 10
        S2,I2,20
        """
    )
    assert csv_codec.parse(text) == [
        {"service": "S1", "instrument": "I1", "rate": "10"},
        {"service": "S2", "instrument": "I2", "rate": "20"},
    ]


def test_parse_skips_blank_lines_and_crlf():
    text = "a,b\r\n\r\n1,2\r\n\n3,4\r\n"
    assert csv_codec.parse(text) == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_parse_drops_rows_with_wrong_field_count():
    text = "a,b,c\n1,2,3\n1,2\n1,2,3,4\n4,5,6"
    rows = csv_codec.parse(text)
    assert rows == [{"a": "1", "b": "2", "c": "3"}, {"a": "4", "b": "5", "c": "6"}]


def test_parse_does_not_understand_quoted_commas():
    # A quoted comma splits the field, so the row is dropped.
    text = 'name,rate\n"Smith, J",10\nplain,5'
    assert csv_codec.parse(text) == [{"name": "plain", "rate": "5"}]


def test_parse_header_only_or_empty_gives_nothing():
    assert csv_codec.parse("") == []
    assert csv_codec.parse("   \n  ") == []
    assert csv_codec.parse("a,b,c\n") == []


def test_escape_field_quotes_only_when_needed():
    assert csv_codec.escape_field("plain") == "plain"
    assert csv_codec.escape_field("a,b") == '"a,b"'
    assert csv_codec.escape_field('say "hi"') == '"say ""hi"""'
    assert csv_codec.escape_field("two\nlines") == '"two\nlines"'
    assert csv_codec.escape_field(None) == ""
    assert csv_codec.escape_field(3) == "3"


def test_serialize_orders_by_headers_and_fills_missing():
    rows = [{"b": "2", "a": "1"}, {"a": "x, y"}]
    assert csv_codec.serialize(rows, ["a", "b"]) == 'a,b\n1,2\n"x, y",'


def test_weak_round_trip_without_special_characters():
    headers = ["service", "instrument", "method", "customerType", "unitType", "rate"]
    rows = [
        {"service": "S1", "instrument": "I1", "method": "M1", "customerType": "C1", "unitType": "U1", "rate": "10"},
        {"service": "S2", "instrument": "I 2", "method": "M-2", "customerType": "C2", "unitType": "U2", "rate": "0.5"},
    ]
    assert csv_codec.parse(csv_codec.serialize(rows, headers)) == rows
