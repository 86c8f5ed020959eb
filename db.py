# db.py
import os
from datetime import datetime
from typing import Optional, Dict, Any, List, Iterable, Tuple

from sqlalchemy import (
    create_engine, Integer, String, DateTime, Text, Boolean, UniqueConstraint, func
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from comiket.parser import LocationRecord
from scraper import TwitterUser

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    # ローカル用 SQLite
    DATABASE_URL = "sqlite:///./local.db"

engine = create_engine(DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)

class Base(DeclarativeBase):
    pass

class BoothEntry(Base):
    __tablename__ = "booth_entries"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(64))          # 例: "東-ニ-24"

    date:     Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    hall:     Mapped[str] = mapped_column(String(4))
    entrance: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    block:    Mapped[str] = mapped_column(String(4))
    space:    Mapped[str] = mapped_column(String(4))
    side:     Mapped[Optional[str]] = mapped_column(String(4), nullable=True)
    raw:      Mapped[str] = mapped_column(Text, default="")

    username:     Mapped[str] = mapped_column(String(64), default="")
    display_name: Mapped[str] = mapped_column(String(256), default="")
    tweet_url:    Mapped[str] = mapped_column(Text, default="")

    visited:  Mapped[bool] = mapped_column(Boolean, default=False)
    position: Mapped[int] = mapped_column(Integer, default=0)   # 表示順
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("key", name="uq_booth_key"),
    )

    def to_record(self) -> LocationRecord:
        return LocationRecord(
            raw=self.raw or "", date=self.date, hall=self.hall, entrance=self.entrance,
            block=self.block, space=self.space, side=self.side,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "comiket_info": self.to_record().to_dict(),
            "twitter_user": {
                "username": self.username,
                "display_name": self.display_name,
            },
            "tweet_url": self.tweet_url,
            "visited": bool(self.visited),
        }

def init_db():
    Base.metadata.create_all(bind=engine)

def get_session():
    return SessionLocal()

# ====== 便利関数 ======
BoothInput = Tuple[str, LocationRecord, TwitterUser, str]

def _apply(entry: BoothEntry, rec: LocationRecord, user: TwitterUser, tweet_url: str):
    entry.date, entry.hall, entry.entrance = rec.date, rec.hall, rec.entrance
    entry.block, entry.space, entry.side = rec.block, rec.space, rec.side
    entry.raw = rec.raw
    entry.username = user.username
    entry.display_name = user.display_name
    entry.tweet_url = tweet_url

def add_booths(entries: Iterable[BoothInput]) -> List[str]:
    """
    まとめて登録。同じキーは上書き（表示順は据え置き）、新規は末尾に追加。
    戻り値は登録したキー。
    """
    keys: List[str] = []
    with get_session() as s:
        last = s.query(func.max(BoothEntry.position)).scalar()
        pos = -1 if last is None else last
        for key, rec, user, tweet_url in entries:
            entry = s.query(BoothEntry).filter_by(key=key).first()
            if not entry:
                pos += 1
                entry = BoothEntry(key=key, position=pos, visited=False)
                s.add(entry)
            _apply(entry, rec, user, tweet_url)
            keys.append(key)
        try:
            s.commit()
        except Exception:
            s.rollback()
            raise
    return keys

def add_booth(key: str, rec: LocationRecord, user: TwitterUser, tweet_url: str) -> str:
    return add_booths([(key, rec, user, tweet_url)])[0]

def get_booth(key: str) -> Optional[Dict[str, Any]]:
    with get_session() as s:
        entry = s.query(BoothEntry).filter_by(key=key).first()
        return entry.to_dict() if entry else None

def remove_booth(key: str) -> bool:
    """削除（訪問済みフラグも一緒に消える）"""
    with get_session() as s:
        n = s.query(BoothEntry).filter_by(key=key).delete()
        s.commit()
        return n > 0

def clear_booths():
    with get_session() as s:
        s.query(BoothEntry).delete()
        s.commit()

def toggle_visited(key: str) -> Optional[bool]:
    """訪問済みを反転して新しい値を返す。未登録なら None"""
    with get_session() as s:
        entry = s.query(BoothEntry).filter_by(key=key).first()
        if not entry:
            return None
        entry.visited = not entry.visited
        s.commit()
        return entry.visited

def is_visited(key: str) -> bool:
    with get_session() as s:
        entry = s.query(BoothEntry).filter_by(key=key).first()
        return bool(entry and entry.visited)

def clear_visited():
    with get_session() as s:
        s.query(BoothEntry).update({BoothEntry.visited: False})
        s.commit()

def reorder_booths(order: List[str]):
    """
    指定順に並べ替える。知らないキーは無視、指定漏れは元の順で後ろに付く。
    """
    with get_session() as s:
        entries = s.query(BoothEntry).order_by(BoothEntry.position, BoothEntry.id).all()
        by_key = {e.key: e for e in entries}
        ordered = [by_key[k] for k in dict.fromkeys(order) if k in by_key]
        seen = {e.key for e in ordered}
        ordered += [e for e in entries if e.key not in seen]
        for i, e in enumerate(ordered):
            e.position = i
        s.commit()

def get_ordered_booths() -> List[Dict[str, Any]]:
    with get_session() as s:
        entries = s.query(BoothEntry).order_by(BoothEntry.position, BoothEntry.id).all()
        return [e.to_dict() for e in entries]
