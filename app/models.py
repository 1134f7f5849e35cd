from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="", nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    table_items = relationship("TableItem", back_populates="project", cascade="all, delete-orphan")
    threats = relationship("SavedThreat", back_populates="project", cascade="all, delete-orphan")
    controls = relationship("SecurityControl", back_populates="project", cascade="all, delete-orphan")


class TableItem(Base):
    __tablename__ = "table_items"
    __table_args__ = (Index("ix_table_items_project_type", "project_id", "table_type"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    # Table title, e.g. "Vectors" or "Strategic Objectives".
    table_type = Column(String(64), nullable=False)
    item_text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="table_items")


class SavedThreat(Base):
    __tablename__ = "saved_threats"
    __table_args__ = (Index("ix_saved_threats_project_stage", "project_id", "stage"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    threat_statement = Column(Text, nullable=False)
    stage = Column(String(16), default="initial", nullable=False)
    parent_threat_id = Column(Integer, ForeignKey("saved_threats.id"), nullable=True, index=True)
    # Role -> text mapping used to render the statement. "{}" for legacy or edited rows.
    payload_json = Column(Text, default="{}", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="threats")
    control_links = relationship("ThreatControl", back_populates="threat", cascade="all, delete-orphan")


class SecurityControl(Base):
    __tablename__ = "security_controls"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="", nullable=False)
    layer = Column(Integer, nullable=True)
    type = Column(String(64), default="", nullable=False)
    effectiveness_rating = Column(String(32), default="", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="controls")
    threat_links = relationship("ThreatControl", back_populates="control", cascade="all, delete-orphan")


class ThreatControl(Base):
    __tablename__ = "threat_controls"
    __table_args__ = (UniqueConstraint("threat_id", "control_id", name="ux_threat_controls_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    threat_id = Column(Integer, ForeignKey("saved_threats.id"), nullable=False, index=True)
    control_id = Column(Integer, ForeignKey("security_controls.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    threat = relationship("SavedThreat", back_populates="control_links")
    control = relationship("SecurityControl", back_populates="threat_links")
