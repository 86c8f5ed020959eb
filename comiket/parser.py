# -*- coding: utf-8 -*-
"""
表示名などの自由テキストからコミケのスペース位置を抜き出すパーサ。
例)
  白山たえ*日曜東5「ニ24ab」C106   -> 日曜 東5 ニ 24ab
  にゅむ＠C106 1日目南a-03b & 2日目南j-10a -> 2件
方針:
  1) 「&」「、」「,」で区切って1区切り=最大1件
  2) 日付/ホール/入口/ブロック/番号/サイドを項目ごとに独立して抽出
  3) 各項目は候補パターンを上から順に試し、最初に当たったものを採用
  4) 取れなかった項目は None のまま（例外は出さない）
"""
from __future__ import annotations
import re
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List, Optional, Tuple

from comiket.normalize import fold_digits, fold_latin

# \d と \b は ASCII 基準。空白は全角スペースも許す
_F = re.ASCII
_WS = r"[\s　]"
_HALL = r"[東西南]"
_LETTER = r"[あ-んア-ンa-zA-Zａ-ｚＡ-Ｚ]"
_SEP = r"[-－ー]"
_SEP_OPT = r"[-－ー\s　]*"
_TAIL = r"(?:[ab\s　]|$)"

SEGMENT_RX = re.compile(r"[&＆、,，]")

@dataclass(frozen=True)
class LocationRecord:
    raw: str
    date: Optional[str] = None
    hall: Optional[str] = None
    entrance: Optional[str] = None
    block: Optional[str] = None
    space: Optional[str] = None
    side: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)

    @property
    def complete(self) -> bool:
        return is_complete(self)

# ---- 日付 ----
# (値, 漢字1文字, 英語名, 英略称)
WEEKDAYS: Tuple[Tuple[str, str, str, str], ...] = (
    ("土曜", "土", "saturday", "sat"),
    ("日曜", "日", "sunday", "sun"),
    ("金曜", "金", "friday", "fri"),
    ("月曜", "月", "monday", "mon"),
    ("火曜", "火", "tuesday", "tue"),
    ("水曜", "水", "wednesday", "wed"),
    ("木曜", "木", "thursday", "thu"),
)

CIRCLED_WEEKDAYS = {
    "㈰": "日曜", "㈯": "土曜", "㈮": "金曜", "㈪": "月曜",
    "㈫": "火曜", "㈬": "水曜", "㈭": "木曜",
}

def _weekday_value(token: str) -> Optional[str]:
    t = token.lower()
    for value, kanji, name, abbr in WEEKDAYS:
        if t.startswith(kanji) or t in (name, abbr):
            return value
    return None

def _weekday_alternation(with_kanji: bool) -> str:
    alts: List[str] = []
    for value, kanji, name, abbr in WEEKDAYS:
        alts.append(f"{value}日?")
        if with_kanji:
            alts.append(kanji)
        alts.append(name)
        alts.append(abbr)
    return "|".join(alts)

DateRule = Tuple[re.Pattern, Callable[[re.Match], Optional[str]]]

DATE_RULES: List[DateRule] = [
    # 曜日記号（㈰㈯など）を最優先
    (re.compile("[" + "".join(CIRCLED_WEEKDAYS) + "]"),
     lambda m: CIRCLED_WEEKDAYS[m.group(0)]),
    # N日目
    (re.compile(r"([1-3１-３])日目"),
     lambda m: f"{fold_digits(m.group(1))}日目"),
    # 括弧内の曜日
    (re.compile(rf"[（(]({_weekday_alternation(True)})[）)]", _F | re.I),
     lambda m: _weekday_value(m.group(1))),
    # 括弧なしの曜日
    (re.compile(rf"({_weekday_alternation(False)})", _F | re.I),
     lambda m: _weekday_value(m.group(1))),
    # 8/15, 8月15日
    (re.compile(r"(\d{1,2})[/月](\d{1,2})日?", _F),
     lambda m: f"{m.group(1)}/{m.group(2)}"),
]

# ---- ホール/入口 ----
HALL_RX = re.compile(_HALL)
ENTRANCE_RX = re.compile(rf"{_HALL}{_WS}*([1-9１-９])")

# ---- ブロック（上から順に試す） ----
BLOCK_PATTERNS: List[re.Pattern] = [
    # 「ニ24ab」
    re.compile(rf"「({_LETTER})\d{{2}}", _F),
    # 東5ニ24
    re.compile(rf"{_HALL}\d({_LETTER})\d{{2}}", _F),
    # 西1 め-21
    re.compile(rf"{_HALL}\d{_WS}*({_LETTER}){_SEP_OPT}\d{{2}}", _F),
    # 南a-42a, 南ｐ-29ab
    re.compile(rf"{_HALL}{_WS}*({_LETTER}){_SEP_OPT}\d{{2}}", _F),
    # r-01a
    re.compile(rf"\b({_LETTER}){_SEP}\d{{2}}", _F),
]

# ---- スペース番号（上から順に試す） ----
SPACE_PATTERNS: List[re.Pattern] = [
    re.compile(r"「[^」]*?(\d{2})[ab]*」", _F),
    re.compile(rf"{_HALL}[^0-9]*?(\d{{2}}){_TAIL}", _F),
    re.compile(rf"{_SEP}{_WS}*(\d{{2}}){_TAIL}", _F),
    re.compile(rf"\b(\d{{2}}){_TAIL}", _F),
]

SIDE_RX = re.compile(r"\b(ab|a|b)\b", _F | re.I)

def _extract_date(text: str) -> Optional[str]:
    for rx, to_value in DATE_RULES:
        m = rx.search(text)
        if m:
            return to_value(m)
    return None

def _extract_entrance(text: str) -> Optional[str]:
    m = ENTRANCE_RX.search(text)
    return fold_digits(m.group(1)) if m else None

def _first_group(patterns: List[re.Pattern], text: str) -> Optional[str]:
    for rx in patterns:
        m = rx.search(text)
        if m:
            return m.group(1)
    return None

def _extract_side(text: str, space: Optional[str]) -> Optional[str]:
    if space:
        # 番号の直後（空白は挟んでもよい）
        rx = re.compile(re.escape(space) + rf"{_WS}*(ab|a|b)\b", _F | re.I)
        m = rx.search(text)
    else:
        m = SIDE_RX.search(text)
    return m.group(1).lower() if m else None

def split_segments(text: str) -> List[str]:
    return SEGMENT_RX.split(text)

def extract_location(text: str) -> LocationRecord:
    """1区切りぶんのテキストから LocationRecord を1件作る（全項目 None もあり得る）"""
    hall_m = HALL_RX.search(text)
    block = _first_group(BLOCK_PATTERNS, text)
    if block:
        block = fold_latin(block)  # ひらがなはカタカナにしない
    space = _first_group(SPACE_PATTERNS, text)
    return LocationRecord(
        raw=text,
        date=_extract_date(text),
        hall=hall_m.group(0) if hall_m else None,
        entrance=_extract_entrance(text),
        block=block,
        space=space,
        side=_extract_side(text, space),
    )

def extract_location_list(text: str) -> List[LocationRecord]:
    """
    複数エントリ対応の入口。
    ホールかスペース番号のどちらも取れなかった区切りは黙って捨てる。
    空リスト = 位置情報なし（エラーではない）
    """
    results: List[LocationRecord] = []
    for segment in split_segments(text):
        rec = extract_location(segment)
        if rec.hall or rec.space:
            results.append(rec)
    return results

def format_location(rec: LocationRecord) -> str:
    """日付 / ホール+入口 / ブロック / 番号+サイド を空白区切りで"""
    parts: List[str] = []
    if rec.date:
        parts.append(rec.date)
    if rec.hall:
        parts.append(rec.hall + (rec.entrance or ""))
    if rec.block:
        parts.append(rec.block)
    if rec.space:
        parts.append(rec.space + (rec.side or ""))
    return " ".join(parts)

# ---- 検証 ----
REQUIRED_FIELDS = (("hall", "ホール"), ("block", "ブロック"), ("space", "スペース番号"))

def is_complete(rec: LocationRecord) -> bool:
    """地図に載せられるか（ホール・ブロック・番号が揃っているか）"""
    return bool(rec.hall and rec.block and rec.space)

def missing_fields(rec: LocationRecord) -> List[str]:
    return [label for name, label in REQUIRED_FIELDS if not getattr(rec, name)]

def booth_key(rec: LocationRecord) -> str:
    """保存キー "{hall}-{block}-{space}"。未完成のレコードには作らない"""
    if not is_complete(rec):
        raise ValueError(f"incomplete location: {rec.raw!r}")
    return f"{rec.hall}-{rec.block}-{rec.space}"
