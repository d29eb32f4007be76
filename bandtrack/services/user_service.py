from sqlalchemy.orm import Session
from sqlalchemy import select, func
from fastapi import HTTPException
from passlib.context import CryptContext
from bandtrack.errors import NotFoundError
from bandtrack.models.user import User
from bandtrack.schemas.user import UserCreate, UserUpdate
from bandtrack.schemas.pagination import Page

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(f"Uživatel nenalezen: {user_id}")
    return user


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username))


def get_users(db: Session, page: int = 1, size: int = 50, role: str | None = None) -> Page:
    query = select(User).order_by(User.username)
    if role:
        query = query.where(User.role == role)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    users = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page.build(users, total, page, size)


def create_user(db: Session, data: UserCreate) -> User:
    if get_user_by_username(db, data.username):
        raise HTTPException(status_code=409, detail="Uživatelské jméno již existuje")
    if db.scalar(select(User).where(User.email == data.email)):
        raise HTTPException(status_code=409, detail="E-mail je již použit")
    user = User(
        username=data.username,
        email=data.email,
        full_name=data.full_name,
        hashed_password=hash_password(data.password),
        role=data.role.value,
        is_active=data.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    user = get_user(db, user_id)
    update_data = data.model_dump(exclude_unset=True)
    if "password" in update_data:
        update_data["hashed_password"] = hash_password(update_data.pop("password"))
    if update_data.get("role") is not None:
        update_data["role"] = update_data["role"].value
    for field, value in update_data.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user
