# ecommerce/models.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from .db import Base, SoftDeleteMixin

ROLE_USER = "User"
ROLE_ADMIN = "Admin"


def utcnow():
    return datetime.now(timezone.utc)


class User(SoftDeleteMixin, Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(String(10), nullable=False, default=ROLE_USER)


class Category(SoftDeleteMixin, Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    description = Column(String(200))

    products = relationship("Product", back_populates="category")


class Product(SoftDeleteMixin, Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    image_url = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), index=True, nullable=False)

    category = relationship("Category", back_populates="products")


class Cart(SoftDeleteMixin, Base):
    __tablename__ = "carts"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    items = relationship("CartItem", back_populates="cart", order_by="CartItem.id")


class CartItem(SoftDeleteMixin, Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), index=True, nullable=False)
    quantity = Column(Integer, nullable=False)
    price_at_add_time = Column(Numeric(10, 2), nullable=False, default=0)

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")
