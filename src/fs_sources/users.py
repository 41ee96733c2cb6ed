from typing import Optional
from .schemas.gedcomx import User
from .transport import Transport

CURRENT_USER_PATH = "/platform/users/current"

async def get_current_user(transport: Transport) -> Optional[User]:
    """The user the access token belongs to, or None if the response lists nobody."""
    response = await transport.get(CURRENT_USER_PATH)
    users = response.get_data().get("users") or []
    return User.model_validate(users[0]) if users else None
