from ..common import CamelModel
from ..user.responses import UserResponse


class LoginResponse(CamelModel):
    user: UserResponse
    long_token: str
    short_token: str

class RefreshResponse(CamelModel):
    short_token: str
