from pydantic import BaseModel, ConfigDict


class SessionContext(BaseModel):
    """
    Who is checking out.

    Passed explicitly into OrderBuilder and OrderSubmissionPipeline instead of
    reading a global "current user".
    """
    model_config = ConfigDict(frozen=True)

    user_id: int
    auth_token: str | None = None
