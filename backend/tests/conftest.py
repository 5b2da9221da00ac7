import os

# Keep app startup (init_db) off the on-disk default database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from tourney.database import get_session  # noqa: E402
from tourney.main import app  # noqa: E402
from tourney.repository import SqlEntityRepository  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. Use sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models MUST be imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables created per test and dropped afterwards
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    # Import all models to ensure they're registered BEFORE create_all
    from tourney.models.match import Match  # noqa: F401
    from tourney.models.round import Round  # noqa: F401
    from tourney.models.schedule_claim import ScheduleClaim  # noqa: F401
    from tourney.models.stage import Stage  # noqa: F401
    from tourney.models.stage_item import StageItem  # noqa: F401
    from tourney.models.team import Team  # noqa: F401
    from tourney.models.tournament import Tournament  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="repo")
def repo_fixture(session: Session):
    return SqlEntityRepository(session)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place
    for the entire duration. This ensures the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_stage_item(session: Session):
    """Factory: tournament + teams + one stage with one stage item seeded with those teams."""
    from tourney.models.stage import Stage
    from tourney.models.stage_item import StageItem
    from tourney.models.team import Team
    from tourney.models.tournament import Tournament

    def _make(
        team_names=("Lions", "Tigers", "Bears", "Wolves"),
        stage_type="league",
        config=None,
        ranking=None,
        seed=True,
        item_name="Table A",
    ):
        tournament = Tournament(name="Club Cup", club_id=1, ranking_config_json=ranking)
        session.add(tournament)
        session.commit()
        session.refresh(tournament)

        teams = [Team(tournament_id=tournament.id, name=name) for name in team_names]
        session.add_all(teams)
        session.commit()
        for team in teams:
            session.refresh(team)

        stage = Stage(tournament_id=tournament.id, name="Stage 1", order=0, type=stage_type, config_json=config or {})
        session.add(stage)
        session.commit()
        session.refresh(stage)

        inputs = [{"source_type": "direct", "team_id": t.id, "name": t.name} for t in teams] if seed else []
        stage_item = StageItem(stage_id=stage.id, tournament_id=tournament.id, name=item_name, inputs_json=inputs)
        session.add(stage_item)
        session.commit()
        session.refresh(stage_item)

        return SimpleNamespace(
            tournament_id=tournament.id,
            stage_id=stage.id,
            stage_item_id=stage_item.id,
            team_ids=[t.id for t in teams],
        )

    return _make
