"""
MoodyFlicks - Pydantic Schemas
Domain state persisted in the slot store, the typed subset of catalog records
we actually read, and API request/response bodies.
"""

from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


# ─── Achievements ─────────────────────────────────────────

class Achievement(str, Enum):
    SHARING = "sharing"
    WATCHED_5 = "watched-5"
    CRITIC = "critic"
    COLLECTOR = "collector"
    CURATOR = "curator"
    DAILY_STREAK = "daily-streak"
    QUIZ_MASTER = "quiz-master"
    QUIZ_STREAK = "quiz-streak"


# ─── Notices (toasts rendered by the front end) ───────────

class NoticeKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ACHIEVEMENT = "achievement"
    ERROR = "error"


class Notice(BaseModel):
    title: str
    description: str = ""
    kind: NoticeKind = NoticeKind.INFO


# ─── Persistent State ─────────────────────────────────────

class UserProgress(BaseModel):
    points: int = Field(default=0, ge=0)
    watched_movie_ids: list[int] = Field(default_factory=list)
    rated_movie_ids: list[int] = Field(default_factory=list)
    saved_movie_ids: list[int] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    @field_validator("achievements", mode="before")
    @classmethod
    def drop_unknown_achievements(cls, v):
        """Older clients may have stored flags we no longer know about."""
        known = {a.value for a in Achievement}
        return [a for a in (v or []) if (a.value if isinstance(a, Achievement) else a) in known]

    def has(self, achievement: Achievement) -> bool:
        return achievement in self.achievements


class Collection(BaseModel):
    id: str
    name: str
    description: str = ""
    movie_ids: list[int] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class QuizStats(BaseModel):
    total_quizzes: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    total_questions: int = Field(default=0, ge=0)
    best_score: int = Field(default=0, ge=0)
    streaks: int = Field(default=0, ge=0)
    last_quiz_date: Optional[date] = None


class DailyChallengeState(BaseModel):
    completed_today: bool = False
    last_completed_date: Optional[date] = None
    streak: int = Field(default=0, ge=0)


class ProgressSummary(BaseModel):
    points: int
    level: int
    total_achievements: int
    completion_percentage: int


# ─── Catalog Records ──────────────────────────────────────

class Genre(BaseModel):
    id: int
    name: str = ""


class Keyword(BaseModel):
    id: int = 0
    name: str


class CastMember(BaseModel):
    id: int = 0
    name: str
    character: Optional[str] = None


class CrewMember(BaseModel):
    id: int = 0
    name: str
    job: Optional[str] = None


class Credits(BaseModel):
    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)

    @property
    def director(self) -> Optional[str]:
        for member in self.crew:
            if member.job == "Director":
                return member.name
        return None


class ProductionCountry(BaseModel):
    iso_3166_1: str = ""
    name: str


class CatalogMovie(BaseModel):
    """The subset of a TMDB movie record the app reads. Everything else is ignored."""
    id: int
    title: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[date] = None
    runtime: Optional[int] = None
    vote_average: float = 0.0
    budget: int = 0
    genres: list[Genre] = Field(default_factory=list)
    keywords: list[Keyword] = Field(default_factory=list)
    credits: Credits = Field(default_factory=Credits)
    production_countries: list[ProductionCountry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_payload(cls, data):
        """Discover/trending results carry genre_ids; details carry nested keywords."""
        if not isinstance(data, dict):
            return data
        # TMDB sends explicit nulls; let the field defaults apply instead
        data = {k: v for k, v in data.items() if v is not None}
        if not data.get("genres") and data.get("genre_ids"):
            data["genres"] = [{"id": gid} for gid in data["genre_ids"]]
        keywords = data.get("keywords")
        if isinstance(keywords, dict):
            data["keywords"] = keywords.get("keywords") or keywords.get("results") or []
        if not data.get("title") and data.get("name"):
            data["title"] = data["name"]
        return data

    @field_validator("release_date", mode="before")
    @classmethod
    def parse_release_date(cls, v):
        """Handle TMDB returning dates as strings or empty strings."""
        if v is None or v == "":
            return None
        if isinstance(v, date):
            return v
        if isinstance(v, str):
            try:
                return date.fromisoformat(v[:10])
            except (ValueError, TypeError):
                return None
        return None

    @property
    def release_year(self) -> Optional[int]:
        return self.release_date.year if self.release_date else None

    @property
    def genre_ids(self) -> list[int]:
        return [g.id for g in self.genres]


# ─── Quiz ─────────────────────────────────────────────────

class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    IMAGE_BASED = "image-based"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizQuestion(BaseModel):
    question: str
    options: list[str]
    correct_answer: str
    image: Optional[str] = None
    type: QuestionType
    difficulty: Difficulty
    points: int
    explanation: Optional[str] = None


# ─── Mood Meter ───────────────────────────────────────────

class MoodScore(BaseModel):
    mood: str
    percentage: int


# ─── Export ───────────────────────────────────────────────

class CollectionStats(BaseModel):
    total_movies: int
    average_rating: str  # one decimal, as displayed
    oldest_year: Optional[int] = None
    newest_year: Optional[int] = None
    year_distribution: dict[int, int] = Field(default_factory=dict)


class ExportEntry(BaseModel):
    position: int
    movie_id: int
    title: str
    rating: float
    year: Optional[int] = None
    poster_url: Optional[str] = None


class CollectionExport(BaseModel):
    title: str
    description: Optional[str] = None
    last_updated: date
    generated_on: date
    stats: Optional[CollectionStats] = None
    sort_by: str
    entries: list[ExportEntry] = Field(default_factory=list)
    filename: str


# ─── API Request Bodies ───────────────────────────────────

class RateRequest(BaseModel):
    liked: bool


class CollectionCreate(BaseModel):
    name: str
    description: str = ""


class CollectionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class QuizStart(BaseModel):
    mood: str
    mode: str = Field(default="regular", pattern=r"^(regular|timed|challenge)$")


class AnswerRequest(BaseModel):
    option: str


class TickRequest(BaseModel):
    seconds: float = Field(default=1.0, ge=0)


class TriviaLike(BaseModel):
    fact: str = Field(..., min_length=1)
    movie_id: Optional[int] = None


# ─── API Response Wrappers ────────────────────────────────

class ProgressResponse(BaseModel):
    progress: UserProgress
    summary: ProgressSummary
    changed: Optional[bool] = None
    notices: list[Notice] = Field(default_factory=list)


class HealthCheck(BaseModel):
    status: str = "ok"
    version: str = "1.0.0"
    database: Optional[str] = None
    tmdb: Optional[str] = None
