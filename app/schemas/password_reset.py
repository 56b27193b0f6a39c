from pydantic import BaseModel, Field

class ForgotPasswordIn(BaseModel):
    username: str

class ResetPasswordIn(BaseModel):
    username: str
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)
