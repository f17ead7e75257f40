from typing import Optional
from sqlmodel import Session, select

from .....application.ports.admin_repo import AdminRepository, AdminDto
from .....db.models import Admin


class SqlAdminRepository(AdminRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_by_username(self, username: str) -> Optional[AdminDto]:
        a = self.session.exec(select(Admin).where(Admin.username == username)).first()
        return AdminDto(id=a.id, username=a.username, password_hash=a.password_hash) if a else None

    def ensure(self, username: str, password_hash: str) -> AdminDto:
        """Create the admin account if the username is not taken yet."""
        existing = self.get_by_username(username)
        if existing:
            return existing
        a = Admin(username=username, password_hash=password_hash)
        self.session.add(a)
        self.session.commit()
        self.session.refresh(a)
        return AdminDto(id=a.id, username=a.username, password_hash=a.password_hash)
