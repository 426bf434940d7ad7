
from pydantic import BaseModel, EmailStr, Field

class CredentialsIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)

class UserOut(BaseModel):
    id: int
    email: str

    class Config:
        from_attributes = True

class AuthOut(BaseModel):
    success: bool = True
    user: UserOut

class AuthCheckOut(BaseModel):
    isAuthenticated: bool = True
    user: UserOut

class ChatIn(BaseModel):
    message: str = ""

class ChatOut(BaseModel):
    reply: str
