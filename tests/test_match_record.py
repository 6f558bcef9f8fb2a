"""Tests for MatchRecord construction and the replacement adapter."""

import re

import pytest

from regex_replace.stages.types import Adapter, MatchRecord


def test_record_from_match():
    match = re.search(r"(\d+)-(\d+)", "id 10-20")
    record = MatchRecord.from_match(match)

    assert record[0] == "10-20"
    assert record[1] == "10"
    assert record[2] == "20"
    assert record.index == 3
    assert record.input == "id 10-20"
    assert len(record) == 3
    assert list(record) == ["10-20", "10", "20"]


def test_non_participating_group_is_none():
    record = MatchRecord.from_match(re.search(r"(a)|(b)", "b"))

    assert record[1] is None
    assert record[2] == "b"


def test_named_groups():
    record = MatchRecord.from_match(re.search(r"(?P<name>\w+)=(?P<value>\w*)", "x=1"))

    assert record["name"] == "x"
    assert record["value"] == "1"
    assert record[1] == "x"
    assert record.named == {"name": "x", "value": "1"}


def test_out_of_range_group():
    record = MatchRecord.from_match(re.search("a", "a"))

    with pytest.raises(IndexError):
        record[1]


def test_adapter_passes_record_and_returns_text():
    received = []

    def value(record):
        received.append(record)
        return f"<{record[0]}>"

    adapter = Adapter(value)

    assert re.sub("b", adapter, "abc") == "a<b>c"
    assert received == [MatchRecord(groups=("b",), index=1, input="abc")]


def test_adapter_converts_result():
    assert re.sub("[0-9]", Adapter(lambda record: int(record[0]) * 2), "1 2") == "2 4"


def test_record_is_hashable():
    record = MatchRecord.from_match(re.search(r"(?P<word>\w+)", "hi"))

    assert hash(record) == hash(MatchRecord.from_match(re.search(r"(?P<word>\w+)", "hi")))
    assert {record: "seen"}[record] == "seen"
