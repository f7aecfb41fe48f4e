from pydantic import BaseModel, ConfigDict, Field


class UnitCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)


class UnitResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
