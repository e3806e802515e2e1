from pydantic import BaseModel, Field

# Scores travel as signed 32-bit integers
SCORE_MIN = -2**31
SCORE_MAX = 2**31 - 1


class Team(BaseModel):
    team_name: str
    score: int = Field(0, strict=True, ge=SCORE_MIN, le=SCORE_MAX)
    buzz_lock_owned: bool = False   # true only while this team holds the session's buzz lock
