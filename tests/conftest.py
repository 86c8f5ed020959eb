"""Pytest configuration and fixtures."""
import os

# app.py / db.py は import 時にDBへ繋ぐので、ファイルを作らないインメモリにしておく
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from comiket.parser import LocationRecord
from scraper import TwitterUser


@pytest.fixture
def session_factory(tmp_path, monkeypatch):
    """一時ファイルの SQLite に差し替えた SessionLocal"""
    import db

    engine = create_engine(f"sqlite:///{tmp_path / 'booths.db'}")
    db.Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    monkeypatch.setattr(db, "SessionLocal", factory)
    yield factory
    engine.dispose()


@pytest.fixture
def client(session_factory):
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def sample_user() -> TwitterUser:
    return TwitterUser(username="shiroyama", display_name="白山たえ*日曜東5「ニ24ab」C106")


@pytest.fixture
def sample_record() -> LocationRecord:
    return LocationRecord(
        raw="白山たえ*日曜東5「ニ24ab」C106",
        date="日曜", hall="東", entrance="5", block="ニ", space="24", side="ab",
    )
