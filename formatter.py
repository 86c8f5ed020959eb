# formatter.py
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from comiket.block_map import ALL_BLOCKS_ORDER, DEFAULT_BOOTH_COUNT, get_block_info
from comiket.normalize import normalize_block_name
from comiket.parser import LocationRecord, format_location, is_complete, missing_fields

BlockHighlights = Dict[str, List[int]]

def get_highlighted_booths_by_block(records: Iterable[LocationRecord]) -> BlockHighlights:
    """
    ブロックごとにブース番号を集める。
    ブロック名はそのまま使う（ひらがなはひらがな、カタカナはカタカナのまま）
    例: [東ニ24, 東ニ25, 南a-03] -> {"ニ": [24, 25], "a": [3]}
    """
    out: BlockHighlights = defaultdict(list)
    for rec in records:
        if rec.block and rec.space and rec.space.isdigit():
            out[rec.block].append(int(rec.space))
    return dict(out)

def normalize_highlights(highlights: BlockHighlights) -> BlockHighlights:
    """地図引き当て用にキーをカタカナ/大文字へ寄せる（同じ島はまとめる）"""
    out: BlockHighlights = defaultdict(list)
    for block, nums in highlights.items():
        out[normalize_block_name(block)].extend(nums)
    return dict(out)

def format_booth_location(rec: LocationRecord) -> str:
    """通知用の短い表記: 日曜 東5 ニ-24ab"""
    parts: List[str] = []
    if rec.date:
        parts.append(rec.date)
    if rec.hall:
        parts.append(rec.hall + (rec.entrance or ""))
    if rec.block and rec.space:
        parts.append(f"{rec.block}-{rec.space}{rec.side or ''}")
    elif rec.block:
        parts.append(rec.block)
    elif rec.space:
        parts.append(rec.space + (rec.side or ""))
    return " ".join(parts)

def create_card_data(rec: LocationRecord) -> Dict:
    data: Dict = {"formatted": format_location(rec) or "位置情報"}
    data.update(rec.to_dict())
    data["complete"] = is_complete(rec)
    data["missing"] = missing_fields(rec)
    return data

# ---- 島の簡易レンダリング ----
def island_layout(count: int) -> List[List[Optional[int]]]:
    """
    2列の島。右列は下から上へ 1..rows、左列は上から下へ rows+1..count。
    奇数のときは左列の最後が空き（None）。
    """
    rows = (count + 1) // 2
    layout: List[List[Optional[int]]] = []
    for row in range(rows):
        right = rows - row
        left = rows + row + 1
        layout.append([left if left <= count else None, right])
    return layout

def _cell(num: Optional[int], highlighted: set) -> str:
    if num is None:
        return "  . "
    mark = "*" if num in highlighted else " "
    return f"{mark}{num:02d} "

def render_block(block: str, highlighted: Iterable[int] = ()) -> str:
    info = get_block_info(block)
    count = info.booth_count if info else DEFAULT_BOOTH_COUNT
    marks = set(highlighted)
    lines = [f"[{block}] {count}sp"]
    for left, right in island_layout(count):
        lines.append((_cell(left, marks) + _cell(right, marks)).rstrip())
    return "\n".join(lines)

def render_map(highlights: BlockHighlights, only_highlighted: bool = True) -> str:
    """ALL_BLOCKS_ORDER の順に島を並べる。* が登録ブース"""
    normalized = normalize_highlights(highlights)
    blocks = [b for b in ALL_BLOCKS_ORDER if not only_highlighted or b in normalized]
    # 地図に無いブロック（英字など）は末尾に
    blocks += sorted(b for b in normalized if b not in ALL_BLOCKS_ORDER)
    return "\n\n".join(render_block(b, normalized.get(b, ())) for b in blocks)

def build_message(display_name: str, records: List[LocationRecord]) -> str:
    """
    解析結果の返信テキスト。
    - 完全なものは登録対象として列挙
    - 不完全なものは不足項目を添える
    """
    if not records:
        return f"👤 {display_name}\nコミケ位置情報が見つかりません。手動でブース情報を入力してください。"

    complete = [r for r in records if is_complete(r)]
    partial = [r for r in records if not is_complete(r)]

    parts = [f"👤 {display_name}"]
    if complete:
        parts.append(f"登録（{len(complete)}件）")
        parts.append("、".join(format_booth_location(r) for r in complete))
    if partial:
        parts.append(f"不完全（{len(partial)}件）")
        for r in partial:
            parts.append(f"{format_location(r) or r.raw.strip()}：{'、'.join(missing_fields(r))}が不足")
        if complete:
            parts.append("完全な情報のみ登録されました。「東あ23」のような形式で記載してください。")
    return "\n".join([p for p in parts if p.strip()])
