# -*- coding: utf-8 -*-
"""
表示名の一覧(CSV)からコミケ位置情報をまとめて抜き出す。
- 入力: name 列（列名は --column で変更可）を持つ CSV
- 出力: 1レコード1行。位置が取れなかった行は出力しない
例)
  python tools/batch_extract.py names.csv -o booths.csv
  python tools/batch_extract.py names.csv --complete-only
"""
import sys
import argparse
from typing import List, Dict

import pandas as pd

from comiket.parser import extract_location_list, format_location, is_complete, booth_key

FIELDS = ["date", "hall", "entrance", "block", "space", "side"]
OUTPUT_COLUMNS = ["source_row", "name"] + FIELDS + ["formatted", "complete", "key"]

def extract_frame(df: pd.DataFrame, column: str = "name", complete_only: bool = False) -> pd.DataFrame:
    if column not in df.columns:
        raise KeyError(f"列 {column!r} がありません: {list(df.columns)}")
    rows: List[Dict] = []
    for idx, name in df[column].items():
        if not isinstance(name, str):
            continue
        for rec in extract_location_list(name):
            ok = is_complete(rec)
            if complete_only and not ok:
                continue
            row = {"source_row": idx, "name": name}
            row.update({f: getattr(rec, f) for f in FIELDS})
            row["formatted"] = format_location(rec)
            row["complete"] = ok
            row["key"] = booth_key(rec) if ok else None
            rows.append(row)
    return pd.DataFrame(rows, columns=OUTPUT_COLUMNS)

def main(argv=None):
    ap = argparse.ArgumentParser(description="表示名CSVからコミケ位置情報を抽出")
    ap.add_argument("input", help="入力CSV")
    ap.add_argument("-o", "--output", help="出力CSV（省略時は標準出力）")
    ap.add_argument("--column", default="name", help="表示名の列名")
    ap.add_argument("--complete-only", action="store_true", help="ホール/ブロック/番号が揃ったものだけ")
    args = ap.parse_args(argv)

    # 番号 "03" を数値にされないよう全部文字列で読む
    df = pd.read_csv(args.input, dtype=str, encoding="utf-8")
    out = extract_frame(df, column=args.column, complete_only=args.complete_only)
    if args.output:
        out.to_csv(args.output, index=False, encoding="utf-8")
        print(f"[OK] {len(out)} 件 -> {args.output}")
    else:
        out.to_csv(sys.stdout, index=False)
    return 0

if __name__ == "__main__":
    sys.exit(main())
