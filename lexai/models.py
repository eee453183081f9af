from sqlalchemy import Column, String, Text, DateTime, Date, Boolean, ForeignKey, Enum, Float, Integer, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from lexai.database import Base
import enum
import uuid
from datetime import datetime

# =====================================================
# ENUMS
# =====================================================

class ClientOrigin(str, enum.Enum):
    PRIVATE = "private"
    PUBLIC_DEFENDER = "public_defender"

class CaseType(str, enum.Enum):
    CIVIL = "civil"
    LABOR = "labor"
    CRIMINAL = "criminal"
    FAMILY = "family"
    TAX = "tax"
    SOCIAL_SECURITY = "social_security"
    OTHER = "other"

class ClientStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    CLOSED = "closed"

class PaymentMethod(str, enum.Enum):
    PIX = "pix"
    BOLETO = "boleto"
    CARD = "card"
    TRANSFER = "transfer"
    CASH = "cash"
    STATE_CERTIFICATE = "state_certificate"

class PaymentPlan(str, enum.Enum):
    UPFRONT = "upfront"
    INSTALLMENTS = "installments"
    ON_SUCCESS = "on_success"
    DEFENDER_STANDARD = "defender_standard"
    SOCIAL_SECURITY_MIX = "social_security_mix"

class VoucherStatus(str, enum.Enum):
    AWAITING_SENTENCE = "awaiting_sentence"
    CERTIFICATE_ISSUED = "certificate_issued"
    AWAITING_APPEAL = "awaiting_appeal"
    PAID_BY_STATE = "paid_by_state"
    PENDING = "pending"

class InstallmentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"

class MovementType(str, enum.Enum):
    HEARING = "hearing"
    DEADLINE = "deadline"
    NOTIFICATION = "notification"

class Modality(str, enum.Enum):
    ONLINE = "online"
    IN_PERSON = "in_person"

class ActionType(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"

class EntityType(str, enum.Enum):
    CLIENT = "client"
    MOVEMENT = "movement"
    PROFILE = "profile"
    SYSTEM = "system"

# =====================================================
# TABLES
# =====================================================

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    last_login = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    clients = relationship("Client", back_populates="owner", cascade="all, delete-orphan")
    movements = relationship("Movement", back_populates="owner", cascade="all, delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    name = Column(String(255), default="")
    email = Column(String(255), default="")
    role = Column(String(100), default="Advogado")
    oab = Column(String(50), default="")
    oab_state = Column(String(2), default="")
    cpf = Column(String(20), default="")
    address = Column(Text, default="")
    profile_image = Column(Text)
    logo = Column(Text)
    share_logo = Column(Boolean, default=False)

    notify_deadlines = Column(Boolean, default=True)
    deadline_threshold_days = Column(Integer, default=3)

    # External calendar connection
    google_connected = Column(Boolean, default=False)
    google_email = Column(String(255))
    google_token = Column(Text)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Identity and contact
    name = Column(String(255), nullable=False)
    email = Column(String(255), default="")
    phone = Column(String(50), default="")
    cpf_cnpj = Column(String(20), default="")
    rg = Column(String(30))
    rg_issuing_body = Column(String(30))
    nationality = Column(String(100))
    birth_date = Column(Date)
    marital_status = Column(String(50))
    profession = Column(String(100))
    monthly_income = Column(Float)

    # Address
    address = Column(String(255))
    address_number = Column(String(20))
    complement = Column(String(100))
    neighborhood = Column(String(100))
    city = Column(String(100))
    state = Column(String(2))
    zip_code = Column(String(10))

    # Case
    origin = Column(Enum(ClientOrigin), nullable=False, default=ClientOrigin.PRIVATE)
    case_number = Column(String(50), default="", index=True)
    case_type = Column(Enum(CaseType), nullable=False, default=CaseType.CIVIL)
    case_description = Column(Text, default="")
    status = Column(Enum(ClientStatus), nullable=False, default=ClientStatus.ACTIVE)

    financials = Column(JSON)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="clients")
    movements = relationship("Movement", back_populates="client")


class Movement(Base):
    __tablename__ = "movements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"))
    case_number = Column(String(50), default="")
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5))
    description = Column(Text, nullable=False)
    type = Column(Enum(MovementType), nullable=False, default=MovementType.DEADLINE)
    modality = Column(Enum(Modality))
    source = Column(String(255), default="")

    synced_to_google = Column(Boolean, default=False)
    google_event_id = Column(String(255))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    owner = relationship("User", back_populates="movements")
    client = relationship("Client", back_populates="movements")


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), index=True)
    user_name = Column(String(255))
    action_type = Column(Enum(ActionType), nullable=False)
    entity_type = Column(Enum(EntityType), nullable=False)
    entity_id = Column(String(36))
    description = Column(Text, nullable=False)
    details = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User")
