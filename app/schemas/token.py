from pydantic import BaseModel


# OAuth2 clients expect snake_case token fields, so these stay off BaseConfig
class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str
