# scraper.py
"""
X(Twitter) の投稿URLから、投稿者の表示名と本文を oEmbed 経由で取ってくる。
- 認証不要の publish.twitter.com/oembed を使う
- x.com は twitter.com に読み替える
- 失敗は TwitterError（code で種類を区別）。位置情報が無いこととは別物
"""
from __future__ import annotations
import os
import re
import logging
from dataclasses import dataclass, asdict
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

OEMBED_ENDPOINT = os.getenv("OEMBED_ENDPOINT", "https://publish.twitter.com/oembed")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "15"))

UA = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}

log = logging.getLogger("comiket-map.scraper")

# "表示名 (@user)" 形式の author_name を分ける。"(土)" などは表示名の一部
AUTHOR_RX = re.compile(r"^(.+?)(?:\s*\(@(\w{1,15})\))?$", re.ASCII | re.DOTALL)

class TwitterError(RuntimeError):
    INVALID_URL = "INVALID_URL"
    FETCH_ERROR = "FETCH_ERROR"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.code == self.FETCH_ERROR

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, "retryable": self.retryable}

@dataclass
class TwitterUser:
    username: str
    display_name: str
    tweet_content: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

def is_twitter_url(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return host in ("twitter.com", "x.com") or host.endswith((".twitter.com", ".x.com"))

def extract_username_from_url(url: str) -> Optional[str]:
    """https://x.com/<user>/status/... の <user>。/i/... は対象外"""
    try:
        parts = urlparse(url).path.split("/")
    except ValueError:
        return None
    if len(parts) >= 2 and parts[1] and parts[1] != "i":
        return parts[1]
    return None

def to_twitter_domain(url: str) -> str:
    return url.replace("x.com", "twitter.com", 1)

def extract_tweet_content(html: str) -> str:
    """oEmbed の html（<blockquote><p>…</p>）から本文だけ抜く。リンクは文字だけ残す"""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    p = soup.select_one("blockquote p")
    if not p:
        return ""
    for br in p.find_all("br"):
        br.replace_with("\n")
    return p.get_text().strip()

def split_author_name(author_name: str):
    """-> (表示名, ユーザー名 or None)"""
    m = AUTHOR_RX.match(author_name or "")
    if not m:
        return author_name, None
    return m.group(1), m.group(2)

def fetch_oembed(url: str, client: Optional[httpx.Client] = None) -> dict:
    params = {"url": to_twitter_domain(url), "omit_script": "true", "hide_media": "false"}
    try:
        if client is None:
            with httpx.Client(timeout=HTTP_TIMEOUT) as c:
                res = c.get(OEMBED_ENDPOINT, params=params, headers=UA)
        else:
            res = client.get(OEMBED_ENDPOINT, params=params, headers=UA)
        res.raise_for_status()
        return res.json()
    except httpx.HTTPStatusError as e:
        log.warning("oembed failed: status=%s url=%s", e.response.status_code, url)
        raise TwitterError(TwitterError.FETCH_ERROR, f"Failed to fetch: {e.response.status_code}") from e
    except (httpx.HTTPError, ValueError) as e:
        log.warning("oembed failed: %s url=%s", e, url)
        raise TwitterError(TwitterError.FETCH_ERROR, "ツイート情報の取得に失敗しました") from e

def fetch_twitter_user(url: str, client: Optional[httpx.Client] = None) -> TwitterUser:
    """投稿URL → TwitterUser。URL不正なら INVALID_URL、取得失敗は FETCH_ERROR"""
    url = (url or "").strip()
    if not is_twitter_url(url):
        raise TwitterError(TwitterError.INVALID_URL, "有効なTwitter/X URLではありません")
    username = extract_username_from_url(url)
    if not username:
        raise TwitterError(TwitterError.INVALID_URL, "URLからユーザー名を抽出できませんでした")

    data = fetch_oembed(url, client=client)

    author_name = data.get("author_name") or ""
    display_name, handle = split_author_name(author_name)
    return TwitterUser(
        username=(handle or username).lstrip("@"),
        display_name=display_name or author_name or "Unknown",
        tweet_content=extract_tweet_content(data.get("html") or ""),
    )
