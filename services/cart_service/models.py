from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from shared.config.database import Base, utcnow

class CartItem(Base):
    __tablename__ = "cart_items"
    # One row per (owner, product); NULLs are distinct so each constraint only bites its own owner kind
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        UniqueConstraint("session_id", "product_id", name="uq_cart_items_session_product"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Weak reference: no FK, dangling rows are filtered out when the cart is listed
    product_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    user_id = Column(Integer, nullable=True, index=True)
    session_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
