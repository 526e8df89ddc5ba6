"""
Paint Rewards – Domain Models

Persistence collaborator for the submission/review core:
- Contractor (field painter; registers with a region and optional sub-region)
- Validator (reviews evidence; optionally scoped to a region/sub-region)
- Project (one painting job submitted as evidence)
- ProjectImage (ordered evidence photos)
- AuditLog (who changed what)

IMPORTANT:
- Status values are the ProjectStatus enum values from core/lifecycle.py.
- Region codes are keys of core/regions.py. Legacy contractors may have none.
- Raffle tickets are never stored; see core/eligibility.py.
"""

from __future__ import annotations

from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from .core.context import CONTRACTOR, VALIDATOR
from .core.lifecycle import ProjectStatus, effective_status
from .core.paint_yield import PAINT_MATERIALS
from .core.regions import find_region, sub_region_name
from .extensions import db


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# ---------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------
class Contractor(UserMixin, db.Model):
    """Field contractor. Region/sub-region are fixed at registration."""

    __tablename__ = "contractors"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(30), nullable=False)

    # RFC / RTN / NIT / Tax ID depending on region
    identifier = db.Column(db.String(20), nullable=True)

    # Nullable: contractors created before region capture existed
    region_code = db.Column(db.String(2), nullable=True, index=True)
    sub_region_code = db.Column(db.String(40), nullable=True, index=True)

    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    projects = db.relationship(
        "Project",
        back_populates="contractor",
        order_by="Project.created_at.desc()",
        lazy=True,
    )

    principal_type = CONTRACTOR

    def get_id(self) -> str:
        return f"{CONTRACTOR}:{self.id}"

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def region(self):
        return find_region(self.region_code)

    def to_dict(self) -> dict:
        region = self.region
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "identifier": self.identifier,
            "region_code": self.region_code,
            "region_name": region.name if region else None,
            "sub_region_code": self.sub_region_code,
            "sub_region_name": sub_region_name(self.sub_region_code),
            "created_at": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<Contractor {self.email}>"


class Validator(UserMixin, db.Model):
    """Reviewer. A null region means the validator sees every region."""

    __tablename__ = "validators"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    region_code = db.Column(db.String(2), nullable=True, index=True)
    sub_region_code = db.Column(db.String(40), nullable=True, index=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    principal_type = VALIDATOR

    def get_id(self) -> str:
        return f"{VALIDATOR}:{self.id}"

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "region_code": self.region_code,
            "sub_region_code": self.sub_region_code,
        }

    def __repr__(self):
        return f"<Validator {self.email}>"


# ---------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------
class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)

    contractor_id = db.Column(
        db.Integer,
        db.ForeignKey("contractors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(500), nullable=False)
    area = db.Column(db.Numeric(12, 2), nullable=False)  # m²
    material = db.Column(db.String(40), nullable=True)  # key of PAINT_MATERIALS
    liters = db.Column(db.Integer, nullable=False)
    description = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=ProjectStatus.PENDING.value, index=True)

    # Review fields: set only when status != pending
    validator_id = db.Column(
        db.Integer,
        db.ForeignKey("validators.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    validation_notes = db.Column(db.Text, nullable=True)
    validation_date = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    contractor = db.relationship("Contractor", back_populates="projects")
    validator = db.relationship("Validator", foreign_keys=[validator_id])

    images = db.relationship(
        "ProjectImage",
        back_populates="project",
        order_by=lambda: (ProjectImage.display_order.asc(), ProjectImage.id.asc()),
        cascade="all, delete-orphan",
    )

    @property
    def region_code(self) -> str | None:
        """Region of the owning contractor (projects inherit it)."""
        return self.contractor.region_code if self.contractor else None

    @property
    def display_status(self) -> str:
        return effective_status(self.status).value

    @property
    def material_name(self) -> str | None:
        material = PAINT_MATERIALS.get(self.material or "")
        return material.name if material else None

    def next_image_order(self) -> int:
        if not self.images:
            return 0
        return max(img.display_order or 0 for img in self.images) + 1

    def to_dict(self, include_contractor: bool = False) -> dict:
        data = {
            "id": self.id,
            "contractor_id": self.contractor_id,
            "name": self.name,
            "location": self.location,
            "area": str(self.area) if self.area is not None else None,
            "material": self.material,
            "material_name": self.material_name,
            "liters": self.liters,
            "description": self.description,
            "status": self.status,
            "display_status": self.display_status,
            "validator_id": self.validator_id,
            "validation_notes": self.validation_notes,
            "validation_date": _iso(self.validation_date),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "images": [img.to_dict() for img in self.images],
        }
        if include_contractor and self.contractor:
            data["contractor"] = self.contractor.to_dict()
        return data

    def __repr__(self):
        return f"<Project {self.id} {self.status}>"


class ProjectImage(db.Model):
    __tablename__ = "project_images"

    id = db.Column(db.Integer, primary_key=True)

    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    storage_ref = db.Column(db.String(500), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    project = db.relationship("Project", back_populates="images")

    def to_dict(self) -> dict:
        return {"id": self.id, "url": self.storage_ref, "display_order": self.display_order}


# ---------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------
class AuditLog(db.Model):
    """Audit trail of mutations (contractor and validator actions)."""

    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)

    actor_type = db.Column(db.String(20), nullable=True, index=True)
    actor_id = db.Column(db.Integer, nullable=True, index=True)
    actor_snapshot = db.Column(db.String(255), nullable=True)

    entity_type = db.Column(db.String(50), nullable=False, index=True)
    entity_id = db.Column(db.Integer, nullable=False, index=True)

    action = db.Column(db.String(20), nullable=False, index=True)

    before_data = db.Column(db.Text, nullable=True)
    after_data = db.Column(db.Text, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
