from models.team import Team
from models.session import BuzzResult, Session, TEAM_COUNT

__all__ = ["Team", "BuzzResult", "Session", "TEAM_COUNT"]
