import pytest
from sqlalchemy import create_engine, text


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'cards.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE cards ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "name TEXT NOT NULL, "
                "note TEXT)"
            )
        )
    engine.dispose()
    return url


@pytest.fixture
def seed_cards(db_url):
    def _seed(count: int) -> None:
        engine = create_engine(db_url)
        with engine.begin() as conn:
            for idx in range(1, count + 1):
                conn.execute(
                    text("INSERT INTO cards (name, note) VALUES (:name, :note)"),
                    {"name": f"card-{idx}", "note": None},
                )
        engine.dispose()

    return _seed
