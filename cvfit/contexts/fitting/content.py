"""
Data structures for fitting runs.

Input records describe résumé content as it arrives from upstream (already
deduplicated and relevance-sorted). Output records describe what the engine
kept and in which format. Everything here is a frozen dataclass holding tuples,
so a fitting run can never alias-mutate its inputs.

Structure:
    ResumeContent
    ├── Profile
    ├── Experience[] (ordered by relevance)
    │   └── Achievement[]
    ├── skills: str[]
    ├── Formation[], Project[], Certification[], Language[]
    └── clients: str[], interests: str[]

    FittingResult
    ├── FittedContent (header, summary, FittedExperience[], flat lists)
    ├── zone_usage: ZoneName -> units
    └── FitAction[] (one per degradation, truncation, exclusion or overflow)
"""

from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from cvfit.contexts.layout.content_units import ExperienceFormat, HeaderFormat, SummaryFormat
from cvfit.contexts.layout.zones import CONTENT_ZONES, SkillsDisplayMode, ZoneName


def _require(data: Mapping[str, Any], key: str, record: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{record} is missing required field '{key}'")
    return value


def _strings(values) -> Tuple[str, ...]:
    return tuple(str(v) for v in (values or ()) if v is not None and str(v).strip())


# =============================================================================
# Input records
# =============================================================================


@dataclass(frozen=True)
class Profile:
    """Candidate identity, contact details and elevator pitch."""

    first_name: str
    last_name: str
    title: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    photo_url: Optional[str] = None
    summary: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_contacts(self) -> bool:
        return any((self.email, self.phone, self.location, self.linkedin))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Profile":
        return cls(
            first_name=str(_require(data, "first_name", "Profile")),
            last_name=str(_require(data, "last_name", "Profile")),
            title=data.get("title") or "",
            email=data.get("email"),
            phone=data.get("phone"),
            location=data.get("location"),
            linkedin=data.get("linkedin"),
            photo_url=data.get("photo_url"),
            summary=data.get("summary"),
        )


@dataclass(frozen=True)
class Achievement:
    """One bullet of an experience, optionally pre-scored for impact (0-100)."""

    description: str
    impact_score: Optional[float] = None

    @classmethod
    def from_value(cls, value: Any) -> "Achievement":
        """Build from a bare string or a ``{description, impact_score}`` mapping."""
        if isinstance(value, str):
            return cls(description=value)
        return cls(
            description=str(_require(value, "description", "Achievement")),
            impact_score=value.get("impact_score"),
        )


@dataclass(frozen=True)
class Experience:
    """
    A work experience entry.

    Attributes:
        role: Position held
        employer: Company name
        start_date: Start date (``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``)
        end_date: End date, or None / "present" while ongoing
        context: Mission context paragraph (rendered by the detailed format only)
        achievements: Bullet points in original order
        technologies: Technologies used
        relevance_score: Upstream relevance score (higher is more relevant)
        id: Stable identifier (defaults to ``exp_{index}``)
    """

    role: str
    employer: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    context: Optional[str] = None
    achievements: Tuple[Achievement, ...] = ()
    technologies: Tuple[str, ...] = ()
    relevance_score: Optional[float] = None
    id: Optional[str] = None

    @property
    def label(self) -> str:
        return f'"{self.role}" at {self.employer}'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "Experience":
        end_date = data.get("end_date")
        start_date = data.get("start_date")
        return cls(
            role=str(_require(data, "role", "Experience")),
            employer=str(_require(data, "employer", "Experience")),
            start_date=str(start_date) if start_date is not None else None,
            end_date=str(end_date) if end_date is not None else None,
            context=data.get("context"),
            achievements=tuple(Achievement.from_value(a) for a in data.get("achievements") or ()),
            technologies=_strings(data.get("technologies")),
            relevance_score=data.get("relevance_score"),
            id=data.get("id") or f"exp_{index}",
        )


@dataclass(frozen=True)
class Formation:
    """A degree or training program."""

    degree: str
    school: Optional[str] = None
    year: Optional[str] = None
    details: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Formation":
        year = data.get("year")
        return cls(
            degree=str(_require(data, "degree", "Formation")),
            school=data.get("school"),
            year=str(year) if year is not None else None,
            details=data.get("details"),
            location=data.get("location"),
        )


@dataclass(frozen=True)
class Certification:
    name: str
    issuer: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Certification":
        date = data.get("date")
        return cls(
            name=str(_require(data, "name", "Certification")),
            issuer=data.get("issuer"),
            date=str(date) if date is not None else None,
        )


@dataclass(frozen=True)
class Language:
    name: str
    level: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Language":
        return cls(name=str(_require(data, "name", "Language")), level=data.get("level"))


@dataclass(frozen=True)
class Project:
    name: str
    description: Optional[str] = None
    technologies: Tuple[str, ...] = ()
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            name=str(_require(data, "name", "Project")),
            description=data.get("description"),
            technologies=_strings(data.get("technologies")),
            url=data.get("url"),
        )


@dataclass(frozen=True)
class ResumeContent:
    """Complete, upstream-ordered résumé content handed to the engine."""

    profile: Profile
    experiences: Tuple[Experience, ...] = ()
    skills: Tuple[str, ...] = ()
    formations: Tuple[Formation, ...] = ()
    certifications: Tuple[Certification, ...] = ()
    languages: Tuple[Language, ...] = ()
    projects: Tuple[Project, ...] = ()
    clients: Tuple[str, ...] = ()
    interests: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResumeContent":
        """
        Build content from plain data (e.g. a YAML document loaded with OmegaConf).

        Raises:
            KeyError: If the profile section is missing
            ValueError: If a record lacks a required field
        """
        if "profile" not in data:
            raise KeyError("Resume content is missing the 'profile' section")

        return cls(
            profile=Profile.from_dict(data["profile"]),
            experiences=tuple(
                Experience.from_dict(exp, index)
                for index, exp in enumerate(data.get("experiences") or ())
            ),
            skills=_strings(data.get("skills")),
            formations=tuple(Formation.from_dict(f) for f in data.get("formations") or ()),
            certifications=tuple(
                Certification.from_dict(c) for c in data.get("certifications") or ()
            ),
            languages=tuple(Language.from_dict(lang) for lang in data.get("languages") or ()),
            projects=tuple(Project.from_dict(p) for p in data.get("projects") or ()),
            clients=_strings(data.get("clients")),
            interests=_strings(data.get("interests")),
        )


@dataclass(frozen=True)
class FitPreferences:
    """
    User preferences for a fitting run.

    Attributes:
        include_photo: Ask for the photo header (needs a photo URL and room)
        include_interests: Fit the interests list at all
    """

    include_photo: bool = False
    include_interests: bool = True


# =============================================================================
# Output records
# =============================================================================


class ActionKind(Enum):
    """What happened to a piece of content."""

    DEGRADED = "degraded"
    TRUNCATED = "truncated"
    EXCLUDED = "excluded"
    OVERFLOW = "overflow"
    MISSING = "missing"


@dataclass(frozen=True)
class FitAction:
    """
    One decision the engine took that the user should hear about.

    Attributes:
        kind: Kind of action
        zone: Zone the action applies to (None for page-level overflow)
        message: Human-readable warning
        compression: Whether the action counts toward the compression level
    """

    kind: ActionKind
    zone: Optional[ZoneName]
    message: str
    compression: bool = True


@dataclass(frozen=True)
class FittedHeader:
    """Header as rendered; contact fields are only set for richer formats."""

    format: HeaderFormat
    full_name: str
    title: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class FittedSummary:
    format: SummaryFormat
    text: str


@dataclass(frozen=True)
class FittedExperience:
    """An experience after format selection and achievement reduction."""

    id: str
    format: ExperienceFormat
    units_used: int
    role: str
    employer: str
    dates: str
    relevance_score: Optional[float] = None
    context: Optional[str] = None
    achievements: Tuple[str, ...] = ()
    technologies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ZoneAllocation:
    """
    Output of one zone step of the pipeline.

    Attributes:
        zone: Zone the step filled
        items: Retained entries, in order
        units_used: Sum of the retained entries' unit costs
        actions: Decisions taken while filling the zone
        format: Format chosen for the zone as a whole (header, summary, skills)
    """

    zone: ZoneName
    items: Tuple[Any, ...] = ()
    units_used: int = 0
    actions: Tuple[FitAction, ...] = ()
    format: Optional[Enum] = None


@dataclass(frozen=True)
class FittedContent:
    """The content tree handed to renderers."""

    header: FittedHeader
    summary: Optional[FittedSummary] = None
    experiences: Tuple[FittedExperience, ...] = ()
    skills: Tuple[str, ...] = ()
    skills_display: SkillsDisplayMode = SkillsDisplayMode.FULL
    formations: Tuple[Formation, ...] = ()
    projects: Tuple[Project, ...] = ()
    certifications: Tuple[Certification, ...] = ()
    languages: Tuple[Language, ...] = ()
    clients: Tuple[str, ...] = ()
    interests: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FittingResult:
    """
    Outcome of one fitting run. Produced fresh per run and never mutated.

    Attributes:
        theme_id: Theme actually used
        requested_theme_id: Theme id the caller asked for (differs on fallback)
        content: Fitted content tree
        zone_usage: Units used per content zone (margins excluded)
        total_units_used: Sum of zone_usage
        pages: Page count (1 or 2)
        compression_level_applied: Number of compression actions taken
        actions: Every action, in pipeline order
        warnings: One human-readable warning per action
        fell_back: Whether the requested theme was unknown and the default was used
    """

    theme_id: str
    requested_theme_id: str
    content: FittedContent
    zone_usage: Mapping[ZoneName, int]
    total_units_used: int
    pages: int
    compression_level_applied: int
    actions: Tuple[FitAction, ...] = ()
    warnings: Tuple[str, ...] = ()
    fell_back: bool = False

    def __post_init__(self):
        ordered = {zone: self.zone_usage.get(zone, 0) for zone in CONTENT_ZONES}
        object.__setattr__(self, "zone_usage", MappingProxyType(ordered))

    @property
    def experiences(self) -> Tuple[FittedExperience, ...]:
        return self.content.experiences

    @property
    def experience_formats(self) -> Dict[str, ExperienceFormat]:
        """Format chosen for each retained experience, keyed by experience id."""
        return {exp.id: exp.format for exp in self.content.experiences}

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation with a stable key order."""
        return _to_plain(self)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {_to_plain(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value
