"""
Registry of option kinds served by the API.

Every reference table of the platform is described by one OptionEntity.
The model factory, schemas, service and router factory are all driven by
these entries, so adding a kind means adding one line to OPTION_ENTITIES.

Usage:
    from options_api.registry import get_entity

    entity = get_entity("country_option")
    entity.label           # "Country option"
    entity.id_strategy     # IdStrategy.TOKEN
    entity.unique_fields   # ("name", "dial_code", "code")
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.config.constants import IdStrategy, Limits
from shared.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class FieldSpec:
    """Format rules for one extra string column."""

    name: str
    max_length: int = Limits.MAX_NAME_LENGTH
    required: bool = False
    pattern: str | None = None
    pattern_message: str | None = None


@dataclass(frozen=True)
class OptionEntity:
    """Static description of one option kind."""

    slug: str  # URL segment and registry key, e.g. "gender_option"
    label: str  # Human-readable name for messages
    table_name: str
    id_strategy: str = IdStrategy.TOKEN
    id_prefix: str | None = None  # Required for token ids
    extra_fields: tuple[FieldSpec, ...] = ()
    unique_fields: tuple[str, ...] = ("name",)
    # Writes enqueue change events that regenerate a spreadsheet export
    exportable: bool = False

    def __post_init__(self) -> None:
        if self.id_strategy not in IdStrategy.ALL:
            raise ValueError(f"Unknown id strategy {self.id_strategy!r} for {self.slug}")
        if self.id_strategy == IdStrategy.TOKEN and not self.id_prefix:
            raise ValueError(f"Token id strategy requires an id_prefix for {self.slug}")
        known = {"name", "description"} | {f.name for f in self.extra_fields}
        unknown = [f for f in self.unique_fields if f not in known]
        if unknown:
            raise ValueError(f"Unique fields {unknown} are not columns of {self.slug}")

    @property
    def field_names(self) -> tuple[str, ...]:
        """Writable columns in display order."""
        return ("name", *(f.name for f in self.extra_fields), "description")

    @property
    def uses_sequence(self) -> bool:
        return self.id_strategy == IdStrategy.SEQUENCE


COUNTRY_FIELDS = (
    FieldSpec(
        name="dial_code",
        max_length=5,
        required=True,
        pattern=r"\+[0-9]{1,4}",
        pattern_message="Dial code must be '+' followed by 1 to 4 digits",
    ),
    FieldSpec(
        name="code",
        max_length=2,
        required=True,
        pattern=r"[A-Z]{2}",
        pattern_message="Country code must be exactly two uppercase letters",
    ),
)


def _token(slug: str, label: str, prefix: str, table_name: str | None = None) -> OptionEntity:
    return OptionEntity(
        slug=slug,
        label=label,
        table_name=table_name or slug,
        id_strategy=IdStrategy.TOKEN,
        id_prefix=prefix,
    )


def _sequence(slug: str, label: str, table_name: str | None = None) -> OptionEntity:
    return OptionEntity(
        slug=slug,
        label=label,
        table_name=table_name or slug,
        id_strategy=IdStrategy.SEQUENCE,
    )


_ENTITIES: tuple[OptionEntity, ...] = (
    _sequence("account_type_option", "Account type option"),
    _token("archive_strategy_option", "Archive strategy option", "ARCHIVE_STRATEGY_OPT"),
    _token("authority_type_option", "Authority type option", "AUTHORITY_TYPE_OPT"),
    _token("bid_security_type_option", "Bid security type option", "BID_SECURITY_TYPE_OPT"),
    _token("business_category_option", "Business category option", "BUSINESS_CATEGORY_OPT"),
    _token("business_type_option", "Business type option", "BUSINESS_TYPE_OPT"),
    _token("civil_society_type_option", "Civil society type option", "CIVIL_SOCIETY_TYPE_OPT"),
    _token(
        "clarification_request_status_option",
        "Clarification request status option",
        "CLARIFICATION_REQUEST_STATUS_OPT",
    ),
    _token("country_code_option", "Country code option", "COUNTRY_CODE_OPT"),
    OptionEntity(
        slug="country_option",
        label="Country option",
        table_name="country_option",
        id_strategy=IdStrategy.TOKEN,
        id_prefix="COUNTRY_OPT",
        extra_fields=COUNTRY_FIELDS,
        unique_fields=("name", "dial_code", "code"),
        exportable=True,
    ),
    _token("currency_option", "Currency option", "CURRENCY_OPT"),
    _token("donor_type_option", "Donor type option", "DONOR_TYPE_OPT"),
    _token(
        "evaluation_criteria_phase_option",
        "Evaluation criteria phase option",
        "EVALUATION_CRITERIA_PHASE_OPT",
    ),
    _token("execution_period_option", "Execution period option", "EXECUTION_PERIOD_OPT"),
    _token("gender_option", "Gender option", "GENDER_OPT"),
    _token("language_option", "Language option", "LANGUAGE_OPT"),
    _token("log_level_option", "Log level option", "LOG_LEVEL_OPT"),
    _token(
        "lot_bidding_eligibility_option",
        "Lot bidding eligibility option",
        "LOT_BID_ELIGIBILITY_OPT",
    ),
    _token("market_scope_option", "Market scope option", "MARKET_SCOPE_OPT"),
    _token("metadata_type_option", "Metadata type option", "METADATA_TYPE_OPT"),
    _token("organization_role_option", "Organization role option", "ORGANIZATION_ROLE_OPT"),
    _token("ownership_nature_option", "Ownership nature option", "OWNERSHIP_NATURE_OPT"),
    _sequence("plan_status_option", "Plan status option"),
    _token("position_option", "Position option", "POSITION_OPT"),
    _token("prebid_event_type", "Prebid event type", "PREBID_EVENT_TYPE"),
    _token(
        "prerequisites_activity_type_option",
        "Prerequisites activity type option",
        "PREREQUISITE_ACT_OPT",
    ),
    _token("procurement_method_option", "Procurement method option", "PROCURE_METHOD"),
    _token(
        "procurement_method_threshold",
        "Procurement method threshold",
        "PROCURE_METHOD_THRESHOLD_OPT",
    ),
    _token("procurement_progress_option", "Procurement progress option", "PROCURE_PROGRESS_OPT"),
    _token(
        "procurement_requisition_status_option",
        "Procurement requisition status option",
        "PROCURE_REQUISITION_STATUS_OPT",
    ),
    _sequence("procurement_type_option", "Procurement type option"),
    _token("reason_option", "Reason option", "REASON_OPT"),
    _sequence("scheme_option", "Scheme option"),
    _token("selection_method_option", "Selection method option", "SELECTION_METHOD_OPT"),
    _token("source_of_fund_option", "Source of fund option", "SOURCE_OF_FUND_OPT"),
    _token(
        "tender_required_document_type",
        "Tender required document type",
        "TENDER_REQUIRED_DOC_TYPE_OPT",
    ),
    _token("tender_stage_option", "Tender stage option", "TENDER_STAGE_OPT"),
    _token("tender_status_option", "Tender status option", "TENDER_STATUS_OPT"),
    _token("theme_status_option", "Theme status option", "THEME_STATUS_OPT"),
    _token("unit_of_measure_option", "Unit of measure option", "UNIT_OF_MEASURE_OPT"),
    _token("user_status_option", "User status option", "USER_STATUS_OPT"),
    _token(
        "workflow_stage_status_option",
        "Workflow stage status option",
        "WORKFLOW_STAGE_STATUS_OPT",
    ),
    _token("workspace_type_option", "Workspace type option", "WORKSPACE_TYPE_OPT"),
)

OPTION_ENTITIES: dict[str, OptionEntity] = {entity.slug: entity for entity in _ENTITIES}

COUNTRY_OPTION = OPTION_ENTITIES["country_option"]


def get_entity(slug: str) -> OptionEntity:
    """
    Look up a registered option kind.

    Raises:
        NotFoundError: If no kind is registered under the slug
    """
    entity = OPTION_ENTITIES.get(slug)
    if entity is None:
        raise NotFoundError("Option kind", slug)
    return entity
