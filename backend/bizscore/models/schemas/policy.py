"""Pydantic schemas for risk policy administration."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bizscore.core.enums import (
    ConditionField,
    ConditionOperator,
    LogicalOperator,
    PolicyAction,
    PolicyType,
)


# ==================== Policy Condition Schemas ====================


class PolicyConditionCreate(BaseModel):
    """Schema for one condition of a new policy."""

    field: ConditionField
    operator: ConditionOperator
    value: Optional[str] = Field(None, max_length=255)
    numeric_value: Optional[float] = None
    boolean_value: Optional[bool] = None
    logical_operator: Optional[LogicalOperator] = Field(
        None, description="Connector to the next condition in the list"
    )


class PolicyConditionResponse(BaseModel):
    """Schema for policy condition response."""

    id: UUID
    position: int
    field: str
    operator: str
    value: Optional[str] = None
    numeric_value: Optional[float] = None
    boolean_value: Optional[bool] = None
    logical_operator: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ==================== Risk Policy Schemas ====================


class RiskPolicyCreate(BaseModel):
    """Schema for creating a risk policy with its conditions."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    policy_type: PolicyType
    is_active: bool = True
    priority: int = Field(default=1, ge=0)
    action: PolicyAction
    action_value: Optional[str] = Field(None, max_length=255)
    conditions: list[PolicyConditionCreate] = []

    @model_validator(mode="after")
    def validate_priority_action(self) -> "RiskPolicyCreate":
        """SET_PRIORITY needs the priority to set."""
        if self.action == PolicyAction.SET_PRIORITY and not self.action_value:
            raise ValueError("SET_PRIORITY policies require an action_value")
        return self


class RiskPolicyStatusUpdate(BaseModel):
    """Schema for toggling a policy on or off."""

    is_active: bool


class RiskPolicyResponse(BaseModel):
    """Schema for risk policy response."""

    id: UUID
    name: str
    description: Optional[str] = None
    policy_type: str
    is_active: bool
    priority: int
    action: str
    action_value: Optional[str] = None
    conditions: list[PolicyConditionResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
