# -*- coding: utf-8 -*-
"""
文字種の正規化ヘルパー（コードポイントの加減算だけで済ませる）
- 全角数字 → 半角数字
- 全角英字 → 半角英字（大文字/小文字はそのまま）
- ひらがな → カタカナ（地図引き当て用。パーサ本体では使わない）
"""
import re

_FULLWIDTH_OFFSET = 0xFEE0
_KANA_OFFSET = 0x60

_FW_DIGIT_RX = re.compile(r"[０-９]")
_FW_LATIN_RX = re.compile(r"[ａ-ｚＡ-Ｚ]")
_HIRAGANA_RX = re.compile(r"[ぁ-ゖ]")

def _shift(offset: int):
    return lambda m: chr(ord(m.group(0)) + offset)

def fold_digits(s: str) -> str:
    """全角数字だけを半角へ。半角のものはそのまま。"""
    return _FW_DIGIT_RX.sub(_shift(-_FULLWIDTH_OFFSET), s)

def fold_latin(s: str) -> str:
    return _FW_LATIN_RX.sub(_shift(-_FULLWIDTH_OFFSET), s)

def hiragana_to_katakana(s: str) -> str:
    return _HIRAGANA_RX.sub(_shift(_KANA_OFFSET), s)

def normalize_block_name(block: str) -> str:
    """ブロック名の正規化（ひらがな→カタカナ、英字は大文字）"""
    return hiragana_to_katakana(block).upper()
