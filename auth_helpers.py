"""
Authentication helpers
Users sign up with a username/password; the Flask session carries the user id
"""
import logging
from functools import wraps
from typing import Dict, Optional

from flask import g, session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from database import get_db
from errors import Unauthorized
from models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def signup_user(db: Session, username: str, password: str) -> Dict:
    """
    Create a new user

    Args:
        db: request session
        username: unique display name
        password: plain password (min 6 characters), stored hashed

    Returns:
        Dict with success flag and either the user or an error message
    """
    username = (username or "").strip()
    if not username or not password:
        return {"success": False, "error": "Username and password are required"}
    if len(password) < MIN_PASSWORD_LENGTH:
        return {"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}

    user = User(username=username, password_hash=generate_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return {"success": False, "error": "Username already taken. Please choose a different username."}

    db.refresh(user)
    logger.info("User created: %s (id %s)", username, user.id)
    return {"success": True, "user": user, "message": "Account created successfully"}


def login_user(db: Session, username: str, password: str) -> Dict:
    """Check credentials and store the user id in the session"""
    user = db.execute(select(User).where(User.username == (username or "").strip())).scalar_one_or_none()
    if user is None or not check_password_hash(user.password_hash, password or ""):
        return {"success": False, "error": "Invalid username or password"}

    session.clear()
    session["user_id"] = user.id
    logger.info("User logged in: %s", user.username)
    return {"success": True, "user": user, "message": f"Welcome back, {user.username}!"}


def logout_user() -> bool:
    had_user = "user_id" in session
    session.clear()
    return had_user


def resolve_caller(db: Session, user_id: Optional[int]) -> User:
    """Map the session's user id to a live user row"""
    if user_id is None:
        raise Unauthorized("Login required")
    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("User not found")
    return user


def login_required(fn):
    """Resolve the caller before the view runs; the user is available as g.user"""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.user = resolve_caller(get_db(), session.get("user_id"))
        return fn(*args, **kwargs)
    return wrapper
