"""
Analysis normalizer.

The single boundary between untyped AI output and the ContractAnalysis
model. Every optional section and every list entry is validated on its
own; anything malformed is dropped rather than failing the analysis.
Only a missing summary (or a payload that is not an object) is fatal.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Callable

import structlog
from pydantic.alias_generators import to_snake

from clauselens.config import Settings, get_settings
from clauselens.exceptions import MalformedAnalysisError
from clauselens.models.analysis import (
    AnalysisMetadata,
    ConfidentialityTerms,
    ContractAnalysis,
    ContractDates,
    ContractMetadata,
    FinancialDetails,
    ForceMajeureTerms,
    InsuranceTerms,
    IntellectualPropertyTerms,
    KeyParties,
    LegalInfo,
    Milestone,
    PaymentAmount,
    PerformanceMetrics,
    RenewalTerms,
    Signatory,
    StructuredTerms,
    TerminationTerms,
)
from clauselens.models.risk import (
    DEFAULT_IMPORTANCE,
    DEFAULT_RISK_TYPE,
    DEFAULT_SEVERITY,
    ClauseExplanation,
    ClauseImportance,
    RiskFlag,
    RiskSeverity,
    RiskType,
)

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

UNKNOWN_PARTY = "Unknown"


# =============================================================================
# Scalar coercion
# =============================================================================


def _fenced(text: str, start: int) -> str:
    """Body of a code fence opened at `start`; an unclosed fence runs to the end."""
    end = text.find("```", start)
    if end == -1:
        return text[start:].strip()
    return text[start:end].strip()


def parse_json_payload(text: str) -> Any:
    """Extract JSON from an AI text reply, tolerating code fences and chatter."""
    if "```json" in text:
        text = _fenced(text, text.find("```json") + 7)
    elif "```" in text:
        text = _fenced(text, text.find("```") + 3)

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        start = text.find("{")
        end = text.rfind("}") + 1
        if start >= 0 and end > start:
            try:
                return json.loads(text[start:end])
            except (ValueError, RecursionError):
                return None
        return None


def _get(raw: dict, key: str) -> Any:
    """Look up a camelCase key, falling back to its snake_case spelling."""
    if key in raw:
        return raw[key]
    return raw.get(to_snake(key))


def _text(value: Any) -> str | None:
    """Trimmed non-empty text, numbers rendered as text, anything else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        try:
            return str(value)
        except ValueError:
            # int too large to render
            return None
    return None


def _verbatim(value: Any) -> str | None:
    """Untrimmed text for excerpts, None when blank or not a string."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [item for item in (_text(v) for v in value) if item]


def _coerce_enum(enum_cls, value: Any, default, hyphenate: bool = False):
    """Map raw input onto a closed enum, falling back to the default member."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default
    key = value.strip().lower()
    if hyphenate:
        key = re.sub(r"[\s_]+", "-", key)
    try:
        return enum_cls(key)
    except ValueError:
        return default


def coerce_risk_type(value: Any) -> RiskType:
    return _coerce_enum(RiskType, value, DEFAULT_RISK_TYPE, hyphenate=True)


def coerce_severity(value: Any) -> RiskSeverity:
    return _coerce_enum(RiskSeverity, value, DEFAULT_SEVERITY)


def coerce_importance(value: Any) -> ClauseImportance:
    return _coerce_enum(ClauseImportance, value, DEFAULT_IMPORTANCE)


def _section(model_cls, **fields):
    """Build a section model, or None when every field is empty."""
    if all(value is None or value == [] for value in fields.values()):
        return None
    return model_cls(**fields)


# =============================================================================
# Normalizer
# =============================================================================


class AnalysisNormalizer:
    """
    Validates and coerces raw AI output into a ContractAnalysis.

    Deterministic for a given input; the only time dependency is the
    `analyzedAt` stamp, taken from the injected clock when absent.
    """

    def __init__(self, settings: Settings | None = None, clock: Clock | None = None):
        self.settings = settings or get_settings()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def normalize(self, raw: Any, now: datetime | None = None) -> ContractAnalysis:
        """
        Normalize one raw analysis payload.

        Raises MalformedAnalysisError when the payload is not an object or
        has no summary.
        """
        previous = None
        if isinstance(raw, ContractAnalysis):
            previous = raw.metadata
            raw = raw.to_dict()
        elif isinstance(raw, (str, bytes)):
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8", errors="replace")
            raw = parse_json_payload(raw)

        if not isinstance(raw, dict):
            raise MalformedAnalysisError(
                f"Analysis payload must be an object, got {type(raw).__name__}"
            )

        summary = _text(_get(raw, "summary"))
        if not summary:
            raise MalformedAnalysisError("Analysis payload has no summary")

        risk_flags = self._risk_flags(_get(raw, "riskFlags"))
        clause_explanations = self._clause_explanations(_get(raw, "clauseExplanations"))

        analysis = ContractAnalysis(
            summary=summary,
            key_parties=self._optional(raw, "keyParties", self._key_parties),
            duration=_text(_get(raw, "duration")),
            payment_terms=_text(_get(raw, "paymentTerms")),
            obligations=_text_list(_get(raw, "obligations")),
            risk_flags=risk_flags,
            clause_explanations=clause_explanations,
            financial_details=self._optional(raw, "financialDetails", self._financial_details),
            dates=self._optional(raw, "dates", self._dates),
            legal_info=self._optional(raw, "legalInfo", self._legal_info),
            contract_metadata=self._optional(raw, "contractMetadata", self._contract_metadata),
            structured_terms=self._optional(raw, "structuredTerms", self._structured_terms),
            performance_metrics=self._optional(
                raw, "performanceMetrics", self._performance_metrics
            ),
            metadata=self._metadata(
                _get(raw, "metadata"), len(clause_explanations), now, previous
            ),
        )

        logger.debug(
            "analysis_normalized",
            risk_flags=len(analysis.risk_flags),
            clause_explanations=len(analysis.clause_explanations),
            model=analysis.metadata.model,
        )
        return analysis

    # =========================================================================
    # Lists
    # =========================================================================

    def _risk_flags(self, value: Any) -> list[RiskFlag]:
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("risk_flags_dropped", reason="not a list")
            return []

        candidates = []
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                logger.warning("risk_flag_dropped", index=index, reason="not an object")
                continue
            title = _text(_get(item, "title"))
            description = _text(_get(item, "description"))
            if not title or not description:
                logger.warning(
                    "risk_flag_dropped", index=index, reason="missing title or description"
                )
                continue
            candidates.append((item, title, description))

        # Provided ids win; the first occurrence of a duplicate keeps it.
        reserved: set[str] = set()
        provided_ids: list[str | None] = []
        for item, _, _ in candidates:
            flag_id = _text(_get(item, "id"))
            if flag_id and flag_id not in reserved:
                reserved.add(flag_id)
                provided_ids.append(flag_id)
            else:
                provided_ids.append(None)

        flags = []
        counter = 0
        for (item, title, description), flag_id in zip(candidates, provided_ids):
            if flag_id is None:
                counter += 1
                flag_id = f"{self.settings.risk_id_prefix}-{counter}"
                while flag_id in reserved:
                    counter += 1
                    flag_id = f"{self.settings.risk_id_prefix}-{counter}"
                reserved.add(flag_id)

            flags.append(
                RiskFlag(
                    id=flag_id,
                    type=coerce_risk_type(_get(item, "type")),
                    severity=coerce_severity(_get(item, "severity")),
                    title=title,
                    description=description,
                    clause_text=_verbatim(_get(item, "clauseText")),
                    suggestion=_text(_get(item, "suggestion")),
                )
            )
        return flags

    def _clause_explanations(self, value: Any) -> list[ClauseExplanation]:
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("clause_explanations_dropped", reason="not a list")
            return []

        explanations = []
        for index, item in enumerate(value):
            if not isinstance(item, dict):
                logger.warning("clause_explanation_dropped", index=index, reason="not an object")
                continue
            explanation = _text(_get(item, "explanation"))
            if not explanation:
                logger.warning(
                    "clause_explanation_dropped", index=index, reason="missing explanation"
                )
                continue
            explanations.append(
                ClauseExplanation(
                    clause_title=_text(_get(item, "clauseTitle")) or "",
                    clause_text=_verbatim(_get(item, "clauseText")) or "",
                    explanation=explanation,
                    importance=coerce_importance(_get(item, "importance")),
                )
            )
        return explanations

    # =========================================================================
    # Optional sections
    # =========================================================================

    def _optional(self, raw: dict, key: str, builder: Callable[[dict], Any]) -> Any:
        value = _get(raw, key)
        if value is None:
            return None
        if not isinstance(value, dict):
            logger.warning("section_dropped", section=key, reason="not an object")
            return None
        return builder(value)

    def _key_parties(self, value: dict) -> KeyParties | None:
        party1 = _text(_get(value, "party1"))
        party2 = _text(_get(value, "party2"))
        if not party1 and not party2:
            return None
        return KeyParties(party1=party1 or UNKNOWN_PARTY, party2=party2 or UNKNOWN_PARTY)

    def _financial_details(self, value: dict) -> FinancialDetails | None:
        payments = []
        raw_payments = _get(value, "paymentAmounts")
        for item in raw_payments if isinstance(raw_payments, list) else []:
            if not isinstance(item, dict):
                continue
            amount = _text(_get(item, "amount"))
            schedule = _text(_get(item, "schedule"))
            if not amount or not schedule:
                continue
            payments.append(
                PaymentAmount(
                    amount=amount,
                    schedule=schedule,
                    due_date=_text(_get(item, "dueDate")),
                )
            )
        return _section(
            FinancialDetails,
            total_value=_text(_get(value, "totalValue")),
            currency=_text(_get(value, "currency")),
            payment_amounts=payments,
        )

    def _dates(self, value: dict) -> ContractDates | None:
        return _section(
            ContractDates,
            start_date=_text(_get(value, "startDate")),
            end_date=_text(_get(value, "endDate")),
            signing_date=_text(_get(value, "signingDate")),
            effective_date=_text(_get(value, "effectiveDate")),
        )

    def _legal_info(self, value: dict) -> LegalInfo | None:
        return _section(
            LegalInfo,
            governing_law=_text(_get(value, "governingLaw")),
            jurisdiction=_text(_get(value, "jurisdiction")),
            dispute_resolution=_text(_get(value, "disputeResolution")),
            venue=_text(_get(value, "venue")),
        )

    def _contract_metadata(self, value: dict) -> ContractMetadata | None:
        signatories = []
        raw_signatories = _get(value, "signatories")
        for item in raw_signatories if isinstance(raw_signatories, list) else []:
            if not isinstance(item, dict):
                continue
            name = _text(_get(item, "name"))
            party = _text(_get(item, "party"))
            if not name or not party:
                continue
            signatories.append(
                Signatory(
                    name=name,
                    party=party,
                    title=_text(_get(item, "title")),
                    role=_text(_get(item, "role")),
                )
            )
        return _section(
            ContractMetadata,
            contract_type=_text(_get(value, "contractType")),
            category=_text(_get(value, "category")),
            signatories=signatories,
        )

    def _structured_terms(self, value: dict) -> StructuredTerms | None:
        return _section(
            StructuredTerms,
            renewal=self._optional(value, "renewal", self._renewal),
            termination=self._optional(value, "termination", self._termination),
            intellectual_property=self._optional(
                value, "intellectualProperty", self._intellectual_property
            ),
            confidentiality=self._optional(value, "confidentiality", self._confidentiality),
            force_majeure=self._optional(value, "forceMajeure", self._force_majeure),
            insurance=self._optional(value, "insurance", self._insurance),
        )

    def _renewal(self, value: dict) -> RenewalTerms | None:
        auto_renewal = _get(value, "autoRenewal")
        return _section(
            RenewalTerms,
            auto_renewal=auto_renewal if isinstance(auto_renewal, bool) else None,
            notice_period=_text(_get(value, "noticePeriod")),
            renewal_term=_text(_get(value, "renewalTerm")),
            conditions=_text(_get(value, "conditions")),
        )

    def _termination(self, value: dict) -> TerminationTerms | None:
        return _section(
            TerminationTerms,
            notice_period=_text(_get(value, "noticePeriod")),
            termination_fees=_text(_get(value, "terminationFees")),
            conditions=_text_list(_get(value, "conditions")),
        )

    def _intellectual_property(self, value: dict) -> IntellectualPropertyTerms | None:
        return _section(
            IntellectualPropertyTerms,
            ownership=_text(_get(value, "ownership")),
            licensing=_text(_get(value, "licensing")),
            restrictions=_text(_get(value, "restrictions")),
        )

    def _confidentiality(self, value: dict) -> ConfidentialityTerms | None:
        return _section(
            ConfidentialityTerms,
            scope=_text(_get(value, "scope")),
            duration=_text(_get(value, "duration")),
            exceptions=_text_list(_get(value, "exceptions")),
        )

    def _force_majeure(self, value: dict) -> ForceMajeureTerms | None:
        return _section(
            ForceMajeureTerms,
            definition=_text(_get(value, "definition")),
            consequences=_text(_get(value, "consequences")),
        )

    def _insurance(self, value: dict) -> InsuranceTerms | None:
        return _section(
            InsuranceTerms,
            requirements=_text_list(_get(value, "requirements")),
            minimum_coverage=_text(_get(value, "minimumCoverage")),
        )

    def _performance_metrics(self, value: dict) -> PerformanceMetrics | None:
        milestones = []
        raw_milestones = _get(value, "milestones")
        for item in raw_milestones if isinstance(raw_milestones, list) else []:
            if not isinstance(item, dict):
                continue
            name = _text(_get(item, "name"))
            if not name:
                continue
            milestones.append(
                Milestone(
                    name=name,
                    date=_text(_get(item, "date")),
                    description=_text(_get(item, "description")),
                )
            )
        return _section(
            PerformanceMetrics,
            slas=_text_list(_get(value, "slas")),
            kpis=_text_list(_get(value, "kpis")),
            deliverables=_text_list(_get(value, "deliverables")),
            milestones=milestones,
        )

    def _metadata(
        self,
        value: Any,
        total_clauses: int,
        now: datetime | None,
        previous: AnalysisMetadata | None = None,
    ) -> AnalysisMetadata:
        """
        Stamp metadata for the analysis.

        Timestamp and model name come from the clock and settings, never from
        the payload; re-normalizing a built analysis keeps its own stamp.
        """
        claimed = _get(value, "totalClauses") if isinstance(value, dict) else None
        if claimed is not None and claimed != total_clauses:
            logger.debug(
                "total_clauses_recomputed", claimed=claimed, actual=total_clauses
            )
        if previous is not None:
            return AnalysisMetadata(
                total_clauses=total_clauses,
                analyzed_at=previous.analyzed_at,
                model=previous.model,
            )
        return AnalysisMetadata(
            total_clauses=total_clauses,
            analyzed_at=now or self.clock(),
            model=self.settings.analysis_model,
        )


def normalize(raw: Any, now: datetime | None = None) -> ContractAnalysis:
    """Normalize raw AI output with the default settings."""
    return AnalysisNormalizer().normalize(raw, now=now)
