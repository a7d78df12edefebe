"""
Shared data types for the community hub data layer.

Two families live here:
- Wire models (pydantic) that validate the JSON documents served by the
  raw-file host: index, partition and contributors documents.
- Domain records (dataclasses) that the rest of the code passes around:
  InterviewQuestion, Job and the Contributor variant.
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ===== Contributor variant =====

@dataclass(frozen=True)
class NamedContributor:
    """Contributor with a structured profile ({name?, github, linkedin?} in the source)."""
    identifier: str  # GitHub handle, canonical grouping key
    display_name: Optional[str] = None
    profile_url: Optional[str] = None
    kind: Literal["named"] = field(default="named", init=False)


@dataclass(frozen=True)
class AnonymousContributor:
    """Contributor given as a bare string in the source."""
    identifier: str
    kind: Literal["anonymous"] = field(default="anonymous", init=False)


Contributor = Union[NamedContributor, AnonymousContributor]


def contributor_display_name(contributor: Contributor) -> str:
    """Human-readable name for a contributor."""
    if isinstance(contributor, NamedContributor):
        return contributor.display_name or contributor.identifier
    if isinstance(contributor, AnonymousContributor):
        return contributor.identifier
    raise TypeError(f"Unknown contributor type: {type(contributor).__name__}")


def contributor_key(contributor: Contributor) -> str:
    """Key used to group and filter questions by contributor."""
    if isinstance(contributor, NamedContributor):
        return contributor.identifier
    if isinstance(contributor, AnonymousContributor):
        return contributor.identifier
    raise TypeError(f"Unknown contributor type: {type(contributor).__name__}")


# ===== Domain records =====

@dataclass
class InterviewQuestion:
    """One interview question, from either the JSON partitions or the legacy CSV."""
    company: str
    year: str
    role: str
    experience: str
    topic: str
    question: str
    contributor: Contributor
    id: Optional[str] = None
    difficulty: Optional[str] = None  # easy, medium, hard
    tags: List[str] = field(default_factory=list)
    contributed_at: Optional[str] = None


@dataclass
class Job:
    """Job listing row from the jobs spreadsheet."""
    id: str
    title: str
    company: str
    location: Optional[str] = None
    experience: Optional[str] = None
    type: Optional[str] = None
    posted_date: Optional[str] = None
    apply_link: Optional[str] = None


@dataclass
class HomePageData:
    """Everything the homepage renders."""
    interview_questions: List[InterviewQuestion] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)


# ===== Wire models =====

class WireModel(BaseModel):
    """Base for documents read from the raw-file host."""

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class ContributorProfile(WireModel):
    name: Optional[str] = None
    github: str
    linkedin: Optional[str] = None


class PartitionQuestion(WireModel):
    """Question entry inside a partition document (company/year live on the partition)."""
    id: Optional[str] = None
    role: str
    experience: str
    topic: str
    question: str
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    contributor: Union[str, ContributorProfile]
    contributed_at: Optional[str] = Field(default=None, alias="contributedAt")
    tags: List[str] = Field(default_factory=list)


class PartitionDocument(WireModel):
    """data/<year>/<company>.json"""
    company: str
    year: str
    questions: List[PartitionQuestion] = Field(default_factory=list)


class QuestionFile(WireModel):
    """Partition reference inside the index document."""
    path: str
    company: str
    year: str
    count: int = 0
    topics: List[str] = Field(default_factory=list)
    sha256: Optional[str] = None


class IndexMetadata(WireModel):
    companies: List[str] = Field(default_factory=list)
    years: List[str] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)


class IndexData(WireModel):
    """index.json: manifest of every partition plus aggregate metadata."""
    version: str
    last_updated: str = Field(alias="lastUpdated")
    total_questions: int = Field(default=0, alias="totalQuestions")
    files: List[QuestionFile] = Field(default_factory=list)
    metadata: IndexMetadata = Field(default_factory=IndexMetadata)


class ContributorStanding(WireModel):
    name: str
    github: str
    count: int = 0


class ContributorsData(WireModel):
    """contributors.json: leaderboard generated by the questions repository."""
    version: str = "v1"
    last_updated: str = Field(default="", alias="lastUpdated")
    total_contributors: int = Field(default=0, alias="totalContributors")
    contributors: List[ContributorStanding] = Field(default_factory=list)
