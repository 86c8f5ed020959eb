# -*- coding: utf-8 -*-
"""
日付文字列（パーサが返す date）を開催日（1日目/2日目）に振り分ける。
"""
import re
from typing import Literal, Optional, Tuple

DayFilter = Literal["all", "day1", "day2"]

DAY1_PATTERNS: Tuple[str, ...] = ("1日目", "土曜", "土曜日", "㈯", "8/16")
DAY2_PATTERNS: Tuple[str, ...] = ("2日目", "日曜", "日曜日", "㈰", "8/17")

# パース用の全パターン（3日目は旧開催向け）
ALL_DATE_PATTERNS: Tuple[str, ...] = DAY1_PATTERNS + DAY2_PATTERNS + ("3日目", "金曜", "金曜日", "㈮")

def get_day_from_date_string(date_str: Optional[str]) -> Optional[str]:
    """"day1" / "day2" / None"""
    if not date_str:
        return None
    if any(p in date_str for p in DAY1_PATTERNS):
        return "day1"
    if any(p in date_str for p in DAY2_PATTERNS):
        return "day2"
    return None

def matches_date_filter(date_str: Optional[str], day_filter: DayFilter) -> bool:
    if day_filter == "all":
        return True
    return get_day_from_date_string(date_str) == day_filter

def get_date_patterns_for_filter(day_filter: DayFilter) -> Tuple[str, ...]:
    if day_filter == "day1":
        return DAY1_PATTERNS
    if day_filter == "day2":
        return DAY2_PATTERNS
    if day_filter == "all":
        return DAY1_PATTERNS + DAY2_PATTERNS
    raise ValueError(f"unknown day filter: {day_filter}")

def create_date_pattern_regex() -> re.Pattern:
    """既知の日付表記すべてにマッチする正規表現（8/10〜8/19 も含む）"""
    alts = [re.escape(p) for p in ALL_DATE_PATTERNS]
    alts.append(r"8/1[0-9]")
    return re.compile("(" + "|".join(alts) + ")")
