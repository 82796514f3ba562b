from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """The authenticated caller of a protected endpoint."""

    model_config = ConfigDict(frozen=True)

    user_id: int = Field(description="Numeric id of the authenticated user")
