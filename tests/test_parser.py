"""Tests for the booth location parser."""
import pytest

from comiket.parser import (
    LocationRecord,
    booth_key,
    extract_location,
    extract_location_list,
    format_location,
    is_complete,
    missing_fields,
    split_segments,
)


def _fields(rec: LocationRecord) -> dict:
    d = rec.to_dict()
    d.pop("raw")
    return {k: v for k, v in d.items() if v is not None}


class TestExtractLocationList:
    """Display names seen in the wild."""

    @pytest.mark.parametrize("text,expected", [
        ("白山たえ*日曜東5「ニ24ab」C106",
         {"date": "日曜", "hall": "東", "entrance": "5", "block": "ニ", "space": "24", "side": "ab"}),
        ("荻pote@1日目南a-42a",
         {"date": "1日目", "hall": "南", "block": "a", "space": "42", "side": "a"}),
        ("藤原浩一@夏コミ「免罪符屋」2日目 東タ66b",
         {"date": "2日目", "hall": "東", "block": "タ", "space": "66", "side": "b"}),
        ("jonsun@C106日曜日南 r-01a",
         {"date": "日曜", "hall": "南", "block": "r", "space": "01", "side": "a"}),
    ])
    def test_real_names(self, text, expected):
        result = extract_location_list(text)
        assert len(result) == 1
        assert _fields(result[0]) == expected
        assert result[0].raw == text

    def test_two_entries_with_ampersand(self):
        result = extract_location_list("にゅむ＠C106 1日目南a-03b & 2日目南j-10a")

        assert len(result) == 2
        first, second = result
        assert (first.date, first.hall, first.space, first.side) == ("1日目", "南", "03", "b")
        assert (second.date, second.hall, second.space, second.side) == ("2日目", "南", "10", "a")
        assert first.block == "a"
        assert second.block == "j"

    @pytest.mark.parametrize("sep", ["&", "＆", "、", ",", "，"])
    def test_delimiters(self, sep):
        result = extract_location_list(f"1日目東ア01a{sep}2日目東イ02b")
        assert [r.space for r in result] == ["01", "02"]

    def test_noise_segments_are_dropped(self):
        result = extract_location_list("東ニ24, よろしくお願いします, ")
        assert len(result) == 1
        assert result[0].block == "ニ"

    @pytest.mark.parametrize("text", ["", "こんにちは", "Riko", "新刊あります！"])
    def test_no_location_is_empty_list(self, text):
        assert extract_location_list(text) == []

    @pytest.mark.parametrize("text", [
        "白山たえ*日曜東5「ニ24ab」C106",
        "8月16日 西2-45b",
        "東 東 東 12 34 56",
        "abc 12",
    ])
    def test_at_most_one_record_without_delimiter(self, text):
        assert len(extract_location_list(text)) <= 1

    @pytest.mark.parametrize("text", [
        "にゅむ＠C106 1日目南a-03b & 2日目南j-10a",
        "a, b, c、東ア01",
        "&&&",
        "東,西,南,北",
    ])
    def test_never_more_records_than_segments(self, text):
        assert len(extract_location_list(text)) <= len(split_segments(text))

    def test_split_keeps_empty_segments(self):
        assert split_segments("a&&b") == ["a", "", "b"]


class TestDate:

    @pytest.mark.parametrize("text,expected", [
        ("8/15 東A-23a", "8/15"),
        ("8月16日 西2-45b", "8/16"),
        ("土曜日 南1-12ab", "土曜"),
        ("日曜 東3-34", "日曜"),
        ("Riko@C106(土)南ｐ-29ab", "土曜"),
        ("ユーザー@C106(日)東Ｒ-18b", "日曜"),
        ("（金）西あ01", "金曜"),
        ("(Sat)東ア01", "土曜"),
        ("(SUNDAY)東ア01", "日曜"),
        ("(月)東ア01", "月曜"),
        ("(wed)東ア01", "水曜"),
        ("Friday 東ア01", "金曜"),
        ("木曜日 東ア01", "木曜"),
        ("thu 東ア01", "木曜"),
        ("mon 東ア01", "月曜"),
        ("Tue 東ア01", "火曜"),
        ("２日目 南a-10", "2日目"),
        ("３日目 南a-10", "3日目"),
        ("㈯東ア01", "土曜"),
        ("㈭東ア01", "木曜"),
    ])
    def test_date_forms(self, text, expected):
        assert extract_location(text).date == expected

    def test_circled_weekday_wins(self):
        assert extract_location("1日目 ㈰ 東ア01").date == "日曜"

    def test_day_number_beats_weekday(self):
        assert extract_location("日曜 2日目 東ア01").date == "2日目"

    def test_parenthesized_weekday_beats_bare(self):
        assert extract_location("土曜日 (日) 東ア01").date == "日曜"

    def test_leftmost_within_group(self):
        assert extract_location("(日)(土)東ア01").date == "日曜"

    def test_bare_abbreviation_inside_name(self):
        assert extract_location("Pokemon 東ア01").date == "月曜"

    def test_no_date(self):
        assert extract_location("東ア01").date is None


class TestHallAndEntrance:

    def test_first_hall_wins(self):
        assert extract_location("西から来ました 東ア01").hall == "西"

    def test_entrance_right_after_hall(self):
        rec = extract_location("東 3 ホ-15a")
        assert rec.entrance == "3"

    def test_fullwidth_entrance_is_folded(self):
        assert extract_location("東５ア01").entrance == "5"

    def test_entrance_requires_adjacency(self):
        rec = extract_location("東ア01 5")
        assert rec.hall == "東"
        assert rec.entrance is None

    def test_no_hall_no_entrance(self):
        rec = extract_location("r-01a")
        assert rec.hall is None
        assert rec.entrance is None


class TestBlock:

    @pytest.mark.parametrize("text,expected", [
        ("Riko@C106(土)南ｐ-29ab", "p"),
        ("ユーザー@C106(日)東Ｒ-18b", "R"),
        ("作家名@1日目西ｍ-32a", "m"),
        ("名前@2日目南Ｋ-15ab", "K"),
    ])
    def test_fullwidth_block_is_folded(self, text, expected):
        assert extract_location_list(text)[0].block == expected

    @pytest.mark.parametrize("text,expected", [
        ("2日目西1 め-21ab", "め"),
        ("東3 ホ-15a", "ホ"),
        ("南2 ケ-33b", "ケ"),
        ("1日目東2 A-08ab", "A"),
    ])
    def test_block_after_hall_and_entrance(self, text, expected):
        assert extract_location_list(text)[0].block == expected

    def test_fused_hall_entrance_block(self):
        rec = extract_location("東5ニ24")
        assert (rec.entrance, rec.block, rec.space) == ("5", "ニ", "24")

    def test_fused_hall_entrance_with_hyphen(self):
        rec = extract_location("東5ニ-24a")
        assert (rec.entrance, rec.block, rec.space, rec.side) == ("5", "ニ", "24", "a")

    def test_bracket_beats_hall_pattern(self):
        assert extract_location("東ア01「イ02」").block == "イ"

    def test_hiragana_is_kept(self):
        assert extract_location("東あ23").block == "あ"

    def test_hyphen_block_without_hall(self):
        rec = extract_location("r-01a")
        assert rec.block == "r"
        assert rec.space == "01"

    def test_no_block_when_only_digits(self):
        assert extract_location("土曜日 南1-12ab").block is None


class TestSpaceAndSide:

    def test_bracket_space(self):
        rec = extract_location("C106「ニ24ab」")
        assert rec.space == "24"
        assert rec.side == "ab"

    def test_space_after_hyphen(self):
        rec = extract_location("土曜日 南1-12ab")
        assert (rec.space, rec.side) == ("12", "ab")

    def test_space_keeps_zero_padding(self):
        assert extract_location("東ア03").space == "03"

    def test_side_is_lowercased(self):
        assert extract_location("東ア01 AB").side == "ab"

    def test_side_outside_closed_set_is_ignored(self):
        rec = extract_location("東ア01ba")
        assert rec.space == "01"
        assert rec.side is None

    def test_side_without_space(self):
        rec = extract_location("東 b")
        assert rec.space is None
        assert rec.side == "b"

    def test_standalone_two_digits(self):
        assert extract_location("スペース 45").space == "45"


class TestFormatAndValidation:

    def test_format_full_record(self, sample_record):
        assert format_location(sample_record) == "日曜 東5 ニ 24ab"

    def test_format_partial_record(self):
        rec = LocationRecord(raw="x", hall="南", space="12", side="ab")
        assert format_location(rec) == "南 12ab"

    def test_format_empty_record(self):
        assert format_location(LocationRecord(raw="")) == ""

    @pytest.mark.parametrize("text", [
        "白山たえ*日曜東5「ニ24ab」C106",
        "にゅむ＠C106 1日目南a-03b & 2日目南j-10a",
        "土曜日 南1-12ab",
        "東 b",
        "スペース 45",
    ])
    def test_format_has_no_double_spaces(self, text):
        for rec in extract_location_list(text):
            assert "  " not in format_location(rec)

    def test_complete(self, sample_record):
        assert is_complete(sample_record)
        assert sample_record.complete
        assert missing_fields(sample_record) == []

    def test_incomplete(self):
        rec = extract_location("土曜日 南1-12ab")
        assert not is_complete(rec)
        assert missing_fields(rec) == ["ブロック"]

    def test_missing_labels_order(self):
        assert missing_fields(LocationRecord(raw="")) == ["ホール", "ブロック", "スペース番号"]

    def test_booth_key(self, sample_record):
        assert booth_key(sample_record) == "東-ニ-24"

    def test_booth_key_needs_complete_record(self):
        with pytest.raises(ValueError):
            booth_key(LocationRecord(raw="", hall="東"))

    def test_record_is_immutable(self, sample_record):
        with pytest.raises(AttributeError):
            sample_record.hall = "西"
