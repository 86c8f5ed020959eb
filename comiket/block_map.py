# -*- coding: utf-8 -*-
"""東ホールの島（ブロック）ごとのブース数と並び順。読み取り専用の定数。"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from comiket.normalize import hiragana_to_katakana

@dataclass(frozen=True)
class BlockInfo:
    block: str
    booth_count: int

DEFAULT_BOOTH_COUNT = 66

_COUNTS = {
    66: "ウエキクケコサタチツテトヌネヘホマミムヤユ",
    62: "オカシソナニノフメモ",
    54: "イヨ",
    48: "スセハヒ",
}

COMIKET_BLOCK_MAP: Mapping[str, BlockInfo] = MappingProxyType({
    b: BlockInfo(block=b, booth_count=n) for n, blocks in _COUNTS.items() for b in blocks
})

# ヨ → イ の順
ALL_BLOCKS_ORDER: Tuple[str, ...] = tuple("ヨユヤモメムミマホヘフヒハノネヌニナトテツチタソセスシサコケクキカオエウイ")

def get_block_info(block: str) -> Optional[BlockInfo]:
    """ひらがなで来てもカタカナに直して引く"""
    return COMIKET_BLOCK_MAP.get(hiragana_to_katakana(block))
