"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class EntityType(StrEnum):
    """Discriminator used for error messages and typed references."""

    PERSON = "person"
    USER = "user"
    CLIENT = "client"
    RELATIONSHIP = "relationship"

    ESTATE_PLAN = "estate_plan"
    TRUST = "trust"
    WILL = "will"
    ANCILLARY_DOCUMENT = "ancillary_document"
    PLAN_ROLE = "plan_role"
    PLAN_VERSION = "plan_version"
    PLAN_EVENT = "plan_event"
    PLAN_MATTER_LINK = "plan_matter_link"


class PersonType(StrEnum):
    INDIVIDUAL = "individual"
    ENTITY = "entity"


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    LAWYER = "LAWYER"
    STAFF = "STAFF"
    CLIENT = "CLIENT"
    ADVISOR = "ADVISOR"


class UserStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ClientStatus(StrEnum):
    LEAD = "LEAD"
    PROSPECT = "PROSPECT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ReferralType(StrEnum):
    CLIENT = "CLIENT"
    PROFESSIONAL = "PROFESSIONAL"
    EVENT = "EVENT"
    MARKETING = "MARKETING"


class RelationshipContext(StrEnum):
    CLIENT = "client"
    MATTER = "matter"


class PlanType(StrEnum):
    TRUST_BASED = "TRUST_BASED"
    WILL_BASED = "WILL_BASED"


class PlanStatus(StrEnum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    AMENDED = "AMENDED"
    INCAPACITATED = "INCAPACITATED"
    ADMINISTERED = "ADMINISTERED"
    DISTRIBUTED = "DISTRIBUTED"
    CLOSED = "CLOSED"


class TrustType(StrEnum):
    REVOCABLE_LIVING = "REVOCABLE_LIVING"
    IRREVOCABLE_LIVING = "IRREVOCABLE_LIVING"
    TESTAMENTARY = "TESTAMENTARY"
    SPECIAL_NEEDS = "SPECIAL_NEEDS"
    CHARITABLE_REMAINDER = "CHARITABLE_REMAINDER"
    CHARITABLE_LEAD = "CHARITABLE_LEAD"
    ILIT = "ILIT"
    GRAT = "GRAT"
    QPRT = "QPRT"
    DYNASTY = "DYNASTY"
    OTHER = "OTHER"


class WillType(StrEnum):
    SIMPLE = "SIMPLE"
    POUR_OVER = "POUR_OVER"
    TESTAMENTARY_TRUST = "TESTAMENTARY_TRUST"
    OTHER = "OTHER"


class AncillaryDocumentType(StrEnum):
    FINANCIAL_POA = "FINANCIAL_POA"
    HEALTHCARE_POA = "HEALTHCARE_POA"
    ADVANCE_DIRECTIVE = "ADVANCE_DIRECTIVE"
    HIPAA_AUTHORIZATION = "HIPAA_AUTHORIZATION"
    NOMINATION_OF_GUARDIAN = "NOMINATION_OF_GUARDIAN"
    DECLARATION_OF_GUARDIAN = "DECLARATION_OF_GUARDIAN"
    OTHER = "OTHER"


class DocumentStatus(StrEnum):
    DRAFT = "DRAFT"
    EXECUTED = "EXECUTED"
    REVOKED = "REVOKED"
    SUPERSEDED = "SUPERSEDED"


class RoleCategory(StrEnum):
    GRANTOR = "GRANTOR"
    FIDUCIARY = "FIDUCIARY"
    BENEFICIARY = "BENEFICIARY"
    GUARDIAN = "GUARDIAN"
    OTHER = "OTHER"


class RoleType(StrEnum):
    # both grantors of a joint plan hold GRANTOR
    GRANTOR = "GRANTOR"
    TESTATOR = "TESTATOR"

    TRUSTEE = "TRUSTEE"
    CO_TRUSTEE = "CO_TRUSTEE"
    SUCCESSOR_TRUSTEE = "SUCCESSOR_TRUSTEE"
    DISTRIBUTION_TRUSTEE = "DISTRIBUTION_TRUSTEE"

    PRIMARY_BENEFICIARY = "PRIMARY_BENEFICIARY"
    CONTINGENT_BENEFICIARY = "CONTINGENT_BENEFICIARY"
    REMAINDER_BENEFICIARY = "REMAINDER_BENEFICIARY"
    INCOME_BENEFICIARY = "INCOME_BENEFICIARY"
    PRINCIPAL_BENEFICIARY = "PRINCIPAL_BENEFICIARY"

    EXECUTOR = "EXECUTOR"
    CO_EXECUTOR = "CO_EXECUTOR"
    ALTERNATE_EXECUTOR = "ALTERNATE_EXECUTOR"

    FINANCIAL_AGENT = "FINANCIAL_AGENT"
    ALTERNATE_FINANCIAL_AGENT = "ALTERNATE_FINANCIAL_AGENT"
    HEALTHCARE_AGENT = "HEALTHCARE_AGENT"
    ALTERNATE_HEALTHCARE_AGENT = "ALTERNATE_HEALTHCARE_AGENT"

    GUARDIAN_OF_PERSON = "GUARDIAN_OF_PERSON"
    GUARDIAN_OF_ESTATE = "GUARDIAN_OF_ESTATE"
    ALTERNATE_GUARDIAN_OF_PERSON = "ALTERNATE_GUARDIAN_OF_PERSON"
    ALTERNATE_GUARDIAN_OF_ESTATE = "ALTERNATE_GUARDIAN_OF_ESTATE"

    TRUST_PROTECTOR = "TRUST_PROTECTOR"
    INVESTMENT_ADVISOR = "INVESTMENT_ADVISOR"

    WITNESS = "WITNESS"
    NOTARY = "NOTARY"


ROLE_CATEGORY_BY_TYPE: Final[dict[RoleType, RoleCategory]] = {
    RoleType.GRANTOR: RoleCategory.GRANTOR,
    RoleType.TESTATOR: RoleCategory.GRANTOR,
    RoleType.PRIMARY_BENEFICIARY: RoleCategory.BENEFICIARY,
    RoleType.CONTINGENT_BENEFICIARY: RoleCategory.BENEFICIARY,
    RoleType.REMAINDER_BENEFICIARY: RoleCategory.BENEFICIARY,
    RoleType.INCOME_BENEFICIARY: RoleCategory.BENEFICIARY,
    RoleType.PRINCIPAL_BENEFICIARY: RoleCategory.BENEFICIARY,
    RoleType.GUARDIAN_OF_PERSON: RoleCategory.GUARDIAN,
    RoleType.GUARDIAN_OF_ESTATE: RoleCategory.GUARDIAN,
    RoleType.ALTERNATE_GUARDIAN_OF_PERSON: RoleCategory.GUARDIAN,
    RoleType.ALTERNATE_GUARDIAN_OF_ESTATE: RoleCategory.GUARDIAN,
    RoleType.WITNESS: RoleCategory.OTHER,
    RoleType.NOTARY: RoleCategory.OTHER,
}


def category_for(role_type: RoleType) -> RoleCategory:
    """Return the category a role type belongs to (fiduciary unless listed)."""

    return ROLE_CATEGORY_BY_TYPE.get(role_type, RoleCategory.FIDUCIARY)


class ShareType(StrEnum):
    PERCENTAGE = "PERCENTAGE"
    SPECIFIC_AMOUNT = "SPECIFIC_AMOUNT"
    SPECIFIC_PROPERTY = "SPECIFIC_PROPERTY"
    REMAINDER = "REMAINDER"
    PER_STIRPES = "PER_STIRPES"
    PER_CAPITA = "PER_CAPITA"


class RoleStatus(StrEnum):
    ACTIVE = "ACTIVE"
    SUCCEEDED = "SUCCEEDED"
    DECLINED = "DECLINED"
    DECEASED = "DECEASED"
    REMOVED = "REMOVED"
    TERMINATED = "TERMINATED"


class VersionChangeType(StrEnum):
    CREATION = "CREATION"
    AMENDMENT = "AMENDMENT"
    RESTATEMENT = "RESTATEMENT"
    CORRECTION = "CORRECTION"
    ADMIN_UPDATE = "ADMIN_UPDATE"


class VersionSourceType(StrEnum):
    WEALTHCOUNSEL = "WEALTHCOUNSEL"
    MANUAL = "MANUAL"
    OTHER = "OTHER"


class PlanEventType(StrEnum):
    PLAN_CREATED = "PLAN_CREATED"
    PLAN_SIGNED = "PLAN_SIGNED"
    PLAN_AMENDED = "PLAN_AMENDED"
    PLAN_RESTATED = "PLAN_RESTATED"
    GRANTOR_INCAPACITATED = "GRANTOR_INCAPACITATED"
    GRANTOR_CAPACITY_RESTORED = "GRANTOR_CAPACITY_RESTORED"
    FIRST_GRANTOR_DEATH = "FIRST_GRANTOR_DEATH"
    SECOND_GRANTOR_DEATH = "SECOND_GRANTOR_DEATH"
    ADMINISTRATION_STARTED = "ADMINISTRATION_STARTED"
    SUCCESSOR_TRUSTEE_APPOINTED = "SUCCESSOR_TRUSTEE_APPOINTED"
    FINAL_DISTRIBUTION = "FINAL_DISTRIBUTION"
    PLAN_CLOSED = "PLAN_CLOSED"
    NOTE_ADDED = "NOTE_ADDED"
    OTHER = "OTHER"


class MatterRelationshipType(StrEnum):
    CREATION = "CREATION"
    AMENDMENT = "AMENDMENT"
    ADMINISTRATION = "ADMINISTRATION"
    REVIEW = "REVIEW"
    OTHER = "OTHER"
