from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """
    Safe user representation for API responses.

    Critical: Never include password_hash in any response.
    """
    id: int
    username: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)
