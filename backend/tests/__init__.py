# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test engine is built
from cs2cup.models.match import Match  # noqa: F401
from cs2cup.models.team import Team  # noqa: F401
from cs2cup.models.tournament_config import TournamentConfig  # noqa: F401
