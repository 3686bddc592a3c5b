from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Text, ForeignKey, func
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def to_dict(self):
        return {"id": self.id, "username": self.username}


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    money = Column(Numeric(12, 2), nullable=False)
    # transaction date, normalized to the day
    created_at = Column(Date, nullable=False, index=True)
    note = Column(Text, nullable=True)

    category = relationship("Category", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "category": self.category.to_dict() if self.category else None,
            "money": self.money,
            "created_at": self.created_at.isoformat(),
            "note": self.note,
        }
