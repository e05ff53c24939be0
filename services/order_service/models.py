from sqlalchemy import Column, Integer, String, Numeric, Text, JSON, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from shared.config.database import Base, utcnow

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, nullable=False, unique=True) # generated by the caller
    customer_id = Column(Integer, nullable=True, index=True) # NULL for guest orders
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_charge = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False) # subtotal + delivery_charge
    payment_method = Column(String, nullable=False, default="cod") # cod, online
    payment_status = Column(String, nullable=False, default="pending") # pending, paid
    status = Column(String, nullable=False, default="placed")
    delivery_address = Column(JSON, nullable=False)
    delivery_instructions = Column(Text, nullable=True)
    estimated_delivery_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    seller_id = Column(Integer, nullable=False, default=1)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False) # snapshot, decoupled from Product.price
    total_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
