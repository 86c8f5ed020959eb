# app.py
import os
import logging
from typing import Dict, List

from flask import Flask, request, jsonify, Response

import db
import scraper
from comiket.dates import matches_date_filter
from comiket.parser import LocationRecord, booth_key, extract_location_list, is_complete, missing_fields
from formatter import build_message, create_card_data, get_highlighted_booths_by_block, render_map

app = Flask(__name__)
app.json.ensure_ascii = False
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
log = logging.getLogger("comiket-map")

db.init_db()

DAY_FILTERS = ("all", "day1", "day2")

# --------------------------
# ルート/ヘルスチェック
# --------------------------
@app.get("/")
def index():
    return "comiket-map is alive ✨"

@app.get("/_health")
def health():
    return jsonify(ok=True)

def _error(code: str, message: str, status: int, **extra):
    return jsonify(error=code, message=message, **extra), status

def _day_arg():
    day = request.args.get("day", "all")
    return day if day in DAY_FILTERS else None

# --------------------------
# 解析
# --------------------------
@app.post("/api/parse")
def api_parse():
    """テキストだけ解析（保存しない）"""
    body = request.get_json(silent=True) or {}
    text = body.get("text")
    if not isinstance(text, str):
        return _error("MISSING_TEXT", "text が指定されていません", 400)
    records = extract_location_list(text)
    return jsonify(
        records=[create_card_data(r) for r in records],
        highlights=get_highlighted_booths_by_block(records),
    )

def analyze_user(user: scraper.TwitterUser, tweet_url: str) -> Dict:
    """
    表示名から位置情報を抜いて、揃っているものだけ登録する。
    status:
      added      … 1件以上登録（不完全なものがあれば warning 付き）
      incomplete … 抜けたが全部不完全（手動入力へ）
      not_found  … 位置情報なし
    """
    records = extract_location_list(user.display_name)
    complete: List[LocationRecord] = [r for r in records if is_complete(r)]
    partial: List[LocationRecord] = [r for r in records if not is_complete(r)]

    result: Dict = {
        "twitter_user": user.to_dict(),
        "records": [create_card_data(r) for r in records],
        "message": build_message(user.display_name, records),
        "added": [],
    }
    if not records:
        result["status"] = "not_found"
        return result
    if not complete:
        result["status"] = "incomplete"
        result["missing"] = [missing_fields(r) for r in partial]
        return result

    result["added"] = db.add_booths([(booth_key(r), r, user, tweet_url) for r in complete])
    result["status"] = "added"
    if partial:
        result["warning"] = "一部のコミケ位置情報が不完全です"
    log.info("added %d booth(s) for %s", len(result["added"]), user.username)
    return result

@app.post("/api/analyze")
def api_analyze():
    body = request.get_json(silent=True) or {}
    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        return _error("MISSING_URL", "URLが指定されていません", 400)
    url = url.strip()

    try:
        user = scraper.fetch_twitter_user(url)
    except scraper.TwitterError as e:
        log.warning("fetch_twitter_user failed: %s url=%s", e.code, url)
        return jsonify(e.to_dict()), (502 if e.retryable else 400)

    try:
        return jsonify(analyze_user(user, url))
    except Exception as e:
        log.exception("analyze error: %s", e)
        return _error("SERVER_ERROR", "サーバーエラーが発生しました", 500)

# --------------------------
# 登録ブース
# --------------------------
def _filtered_booths(day: str) -> List[Dict]:
    booths = db.get_ordered_booths()
    return [b for b in booths if matches_date_filter(b["comiket_info"]["date"], day)]

@app.get("/api/booths")
def list_booths():
    day = _day_arg()
    if day is None:
        return _error("INVALID_DAY", "day は all / day1 / day2 のいずれかです", 400)
    return jsonify(booths=_filtered_booths(day))

@app.get("/api/booths/<key>")
def get_booth(key: str):
    booth = db.get_booth(key)
    if booth is None:
        return _error("NOT_FOUND", "ブースが見つかりません", 404)
    return jsonify(booth)

@app.delete("/api/booths/<key>")
def delete_booth(key: str):
    if not db.remove_booth(key):
        return _error("NOT_FOUND", "ブースが見つかりません", 404)
    return jsonify(ok=True)

@app.delete("/api/booths")
def clear_booths():
    db.clear_booths()
    return jsonify(ok=True)

@app.post("/api/booths/<key>/visited")
def toggle_visited(key: str):
    visited = db.toggle_visited(key)
    if visited is None:
        return _error("NOT_FOUND", "ブースが見つかりません", 404)
    return jsonify(key=key, visited=visited)

@app.delete("/api/booths/visited")
def clear_visited():
    db.clear_visited()
    return jsonify(ok=True)

@app.post("/api/booths/order")
def reorder_booths():
    body = request.get_json(silent=True) or {}
    order = body.get("order")
    if not isinstance(order, list) or not all(isinstance(k, str) for k in order):
        return _error("INVALID_ORDER", "order はキーの配列で指定してください", 400)
    db.reorder_booths(order)
    return jsonify(order=[b["key"] for b in db.get_ordered_booths()])

# --------------------------
# 地図
# --------------------------
@app.get("/api/map")
def booth_map():
    day = _day_arg()
    if day is None:
        return _error("INVALID_DAY", "day は all / day1 / day2 のいずれかです", 400)
    records = [LocationRecord(**b["comiket_info"]) for b in _filtered_booths(day)]
    highlights = get_highlighted_booths_by_block(records)
    text = render_map(highlights)
    if request.args.get("format") == "text":
        return Response(text, mimetype="text/plain")
    return jsonify(highlights=highlights, map=text)

# --------------------------
# ローカル実行
# --------------------------
if __name__ == "__main__":
    port = int(os.getenv("PORT", "10000"))
    app.run(host="0.0.0.0", port=port)
