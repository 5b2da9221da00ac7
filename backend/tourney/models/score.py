from pydantic import BaseModel, Field


class Score(BaseModel):
    side1: int = Field(default=0, ge=0)
    side2: int = Field(default=0, ge=0)
