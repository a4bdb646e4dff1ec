"""Core enums for type safety across the application."""

from enum import Enum


class PolicyType(str, Enum):
    """Risk policy categories consulted by the policy engine."""

    APPROVAL = "APPROVAL"
    REJECTION = "REJECTION"
    ESCALATION = "ESCALATION"
    PRIORITY = "PRIORITY"


class PolicyAction(str, Enum):
    """Actions a matching policy can take."""

    AUTO_APPROVE = "AUTO_APPROVE"
    AUTO_REJECT = "AUTO_REJECT"
    ESCALATE_TO_MANAGER = "ESCALATE_TO_MANAGER"
    SET_PRIORITY = "SET_PRIORITY"


class ConditionField(str, Enum):
    """Applicant attributes a policy condition may reference."""

    ANNUAL_REVENUE = "annualRevenue"
    YEARS_IN_BUSINESS = "yearsInBusiness"
    EMPLOYEE_COUNT = "employeeCount"
    REQUESTED_AMOUNT = "requestedAmount"
    HAS_EXISTING_LOANS = "hasExistingLoans"
    CREDIT_HISTORY = "creditHistory"
    COMPANY_NAME = "companyName"
    INDUSTRY = "industry"


class ValueKind(str, Enum):
    """Value kind of a condition field, selects the operator set."""

    NUMERIC = "numeric"
    STRING = "string"
    BOOLEAN = "boolean"


class ConditionOperator(str, Enum):
    """Comparison operators for policy conditions."""

    # Numeric
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"

    # Shared by all kinds
    EQUALS = "EQUALS"

    # String
    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"


class LogicalOperator(str, Enum):
    """Connector joining a condition to the next one in its policy."""

    AND = "AND"
    OR = "OR"


class RiskLevel(str, Enum):
    """Risk bucket derived from a normalized score."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ScoreSource(str, Enum):
    """Provenance of a score result."""

    ORACLE = "ORACLE"
    FALLBACK = "FALLBACK"


class ProcessingStatus(str, Enum):
    """Caller-facing processing status derived from the policy decision."""

    AUTO_APPROVED = "AUTO_APPROVED"
    AUTO_REJECTED = "AUTO_REJECTED"
    ESCALATED = "ESCALATED"
    MANUAL_REVIEW = "MANUAL_REVIEW"


class OrchestrationState(str, Enum):
    """States of a single scoring attempt."""

    INTAKE = "INTAKE"
    POLICY_EVALUATED = "POLICY_EVALUATED"
    SCORED = "SCORED"
    FALLBACK_RECOVERY = "FALLBACK_RECOVERY"
    PERSISTED = "PERSISTED"
    ENRICHED = "ENRICHED"


class BatchStatus(str, Enum):
    """Batch scoring report status."""

    COMPLETED = "COMPLETED"


# Decision and priority defaults shared by the resolver, orchestrator and enricher
MANUAL_REVIEW_DECISION = "MANUAL_REVIEW"
PENDING_FINAL_DECISION = "PENDING"
DEFAULT_PRIORITY = "MEDIUM"
SYSTEM_FALLBACK_POLICY = "SYSTEM_FALLBACK"
