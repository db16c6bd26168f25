from __future__ import annotations

import re
import uuid
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.orm import Session

from models import AuditLog, User

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
ADMIN_ROLES = {"admin", "editor"}
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.scalar(select(User).where(User.email == email.strip().lower()))
    if not user or not user.password_hash:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_id(db: Session, user_id: str | uuid.UUID) -> Optional[User]:
    return db.get(User, uuid.UUID(str(user_id)))


def validate_admin_account(email: str, password: str, role: str) -> list[str]:
    errors = []
    if not EMAIL_RE.match((email or "").strip()):
        errors.append(f"Invalid email address: {email!r}")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if role not in ADMIN_ROLES:
        errors.append(f"Role must be one of {sorted(ADMIN_ROLES)}")
    return errors


def create_admin_user(
    db: Session,
    email: str,
    password: str,
    role: str = "admin",
    display_name: str | None = None,
) -> tuple[User, bool]:
    errors = validate_admin_account(email, password, role)
    if errors:
        raise ValueError("; ".join(errors))

    normalized_email = email.strip().lower()
    existing = db.scalar(select(User).where(User.email == normalized_email))
    if existing:
        return existing, False

    user = User(role=role, email=normalized_email, display_name=display_name, password_hash=hash_password(password))
    db.add(user)
    db.flush()
    db.add(AuditLog(user_id=user.id, action="admin_user_created", details_json={"email": normalized_email, "role": role}))
    return user, True
