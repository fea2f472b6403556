from pydantic import BaseModel, field_validator

class LoginIn(BaseModel):
    email: str
    password: str

class SignupIn(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_trim(cls, v: str):
        v = v.strip().lower()
        if not v or "@" not in v:
            raise ValueError("email is invalid")
        if len(v) > 254:
            raise ValueError("email too long")
        return v

    @field_validator("password")
    @classmethod
    def password_min(cls, v: str):
        v = str(v)
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
