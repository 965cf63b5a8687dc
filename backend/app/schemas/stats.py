from pydantic import BaseModel


class StatsResponse(BaseModel):
    available_users: int
    available_teams: int
