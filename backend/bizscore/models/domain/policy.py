"""Risk policy domain models consulted by the policy engine."""

import uuid
from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bizscore.db.base import BaseModel


class RiskPolicy(BaseModel):
    """Administrator-defined rule: ordered conditions plus an action."""

    __tablename__ = "risk_policies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # APPROVAL / REJECTION / ESCALATION / PRIORITY
    policy_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    # Lower values are evaluated first
    priority: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # e.g. AUTO_APPROVE, AUTO_REJECT, ESCALATE_TO_MANAGER, SET_PRIORITY
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    action_value: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    conditions: Mapped[list["PolicyCondition"]] = relationship(
        "PolicyCondition",
        back_populates="policy",
        cascade="all, delete-orphan",
        order_by="PolicyCondition.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return (
            f"<RiskPolicy(id={self.id}, name={self.name!r}, type={self.policy_type}, "
            f"priority={self.priority}, active={self.is_active})>"
        )


class PolicyCondition(BaseModel):
    """
    Atomic predicate of a risk policy.

    Field, operator and logical operator are stored as plain strings; the
    condition evaluator parses them and treats unknown values as a non-match.
    """

    __tablename__ = "policy_conditions"

    policy_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("risk_policies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    field: Mapped[str] = mapped_column(String(50), nullable=False)
    operator: Mapped[str] = mapped_column(String(50), nullable=False)

    # Exactly one comparison value is meaningful, depending on the field kind
    value: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    numeric_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    boolean_value: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Joins this condition to the next one (AND / OR)
    logical_operator: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    policy: Mapped["RiskPolicy"] = relationship("RiskPolicy", back_populates="conditions")

    def __repr__(self) -> str:
        return (
            f"<PolicyCondition(field={self.field}, operator={self.operator}, "
            f"logical={self.logical_operator})>"
        )
