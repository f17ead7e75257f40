# clinic/db/models/people/admin.py
from typing import Optional
from sqlmodel import SQLModel, Field

class Admin(SQLModel, table=True):
    __tablename__ = "admins"
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(max_length=100, unique=True, index=True)
    password_hash: str
