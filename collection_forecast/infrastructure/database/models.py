"""SQLAlchemy ORM models for payments, saved forecasts and pipeline data"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class DailyPayment(Base):
    """Scheduled installment for a tenant on a given day"""

    __tablename__ = "daily_payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Text, nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    paid_amount = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PaymentForecast(Base):
    """Saved horizon forecast, inserted once and read by accuracy/history reports"""

    __tablename__ = "payment_forecasts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    forecast_date = Column(Date, nullable=False, index=True)
    target_date = Column(Date, nullable=False, index=True)
    days_ahead = Column(Integer, nullable=False)
    expected_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    forecast_amount = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    lower_bound = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    upper_bound = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    collection_rate = Column(Float, nullable=False)
    avg_collection_rate = Column(Float, nullable=False)
    trend_slope = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Tenant(Base):
    """Tenant account; status 'pipeline' until converted to 'active'"""

    __tablename__ = "tenants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_name = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, index=True)
    agent_name = Column(Text, nullable=False, index=True)
    service_center = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class AgentEarning(Base):
    """Commission or bonus credited to an agent"""

    __tablename__ = "agent_earnings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    agent_name = Column(Text, nullable=False, index=True)
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    earning_type = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
