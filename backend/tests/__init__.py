# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from tourney.models.match import Match  # noqa: F401
from tourney.models.round import Round  # noqa: F401
from tourney.models.schedule_claim import ScheduleClaim  # noqa: F401
from tourney.models.stage import Stage  # noqa: F401
from tourney.models.stage_item import StageItem  # noqa: F401
from tourney.models.team import Team  # noqa: F401
from tourney.models.tournament import Tournament  # noqa: F401
