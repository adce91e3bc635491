"""
MoodyFlicks - Movie Quiz
Builds an eight-question quiz from a batch of mood movies and runs it as an
explicit state machine driven by answer() and tick().

    awaiting-answer --answer--> showing-explanation --delay--> awaiting-answer
          |                                                         |
          +--timeout (timed mode)--> next question / completed <----+
"""

import logging
import math
import random
import uuid
from collections import OrderedDict
from datetime import date
from enum import Enum
from typing import Optional, Sequence

from moodyflicks.config import get_settings
from moodyflicks.schemas import (
    Achievement,
    CatalogMovie,
    Difficulty,
    QuestionType,
    QuizQuestion,
)
from moodyflicks.services.ledger import ProgressLedger
from moodyflicks.services.moods import MOOD_FLAVOR, normalize_mood
from moodyflicks.services.state import AppState

settings = get_settings()
logger = logging.getLogger(__name__)

MIN_MOVIES = 8
DECOY_TITLE = "The Shawshank Redemption"
RELEASE_YEAR_PIVOT = 2015
RATING_PIVOT = 7.0
TIME_BONUS_DIVISOR = 3
QUIZ_STREAK_TARGET = 3


class QuizGenerationError(Exception):
    pass


class QuizStateError(Exception):
    pass


class QuizMode(str, Enum):
    REGULAR = "regular"
    TIMED = "timed"
    CHALLENGE = "challenge"


class QuizPhase(str, Enum):
    AWAITING_ANSWER = "awaiting-answer"
    SHOWING_EXPLANATION = "showing-explanation"
    COMPLETED = "completed"


def _poster(movie: CatalogMovie) -> Optional[str]:
    if not movie.poster_path:
        return None
    return f"{settings.TMDB_IMAGE_BASE}/w300{movie.poster_path}"


def _titles(movies: Sequence[CatalogMovie]) -> list[str]:
    return [m.title for m in movies]


# ─── Generation ───────────────────────────────────────────

def build_questions(movies: Sequence[CatalogMovie], mood: str) -> list[QuizQuestion]:
    """The eight question templates in their fixed order (unshuffled)."""
    mood = normalize_mood(mood)
    movies = [m for m in movies if m.release_year is not None]
    if len(movies) < MIN_MOVIES:
        raise QuizGenerationError(
            f"Need at least {MIN_MOVIES} movies with a release date, got {len(movies)}"
        )

    top_four = movies[0:4]
    best = sorted(top_four, key=lambda m: m.vote_average, reverse=True)[0]
    first_year = movies[0].release_year
    third = movies[2]
    seventh = movies[6]
    flavor = MOOD_FLAVOR.get(mood, "engaging storyline")
    overview = movies[7].overview[:100]

    return [
        QuizQuestion(
            question="Which movie has the highest rating?",
            options=_titles(top_four),
            correct_answer=best.title,
            type=QuestionType.MULTIPLE_CHOICE,
            difficulty=Difficulty.EASY,
            points=10,
            explanation=f"{best.title} has the highest rating of {best.vote_average:.1f}/10.",
        ),
        QuizQuestion(
            question="What year was this movie released?",
            options=[str(first_year), str(first_year - 1), str(first_year + 1), str(first_year - 2)],
            correct_answer=str(first_year),
            image=_poster(movies[0]),
            type=QuestionType.IMAGE_BASED,
            difficulty=Difficulty.MEDIUM,
            points=15,
            explanation=f"{movies[0].title} was released in {first_year}.",
        ),
        QuizQuestion(
            question="Which movie does this image belong to?",
            options=_titles(movies[1:5]),
            correct_answer=movies[1].title,
            image=_poster(movies[1]),
            type=QuestionType.IMAGE_BASED,
            difficulty=Difficulty.MEDIUM,
            points=15,
            explanation=f"This is the poster for {movies[1].title}, released in {movies[1].release_year}.",
        ),
        QuizQuestion(
            question=f'True or False: "{third.title}" was released after {RELEASE_YEAR_PIVOT}.',
            options=["True", "False"],
            correct_answer="True" if third.release_year > RELEASE_YEAR_PIVOT else "False",
            type=QuestionType.TRUE_FALSE,
            difficulty=Difficulty.EASY,
            points=10,
            explanation=(
                f"{third.title} was released in {third.release_year}, which is "
                f"{'after' if third.release_year > RELEASE_YEAR_PIVOT else 'before or during'} {RELEASE_YEAR_PIVOT}."
            ),
        ),
        QuizQuestion(
            question=f"Which of these movies is NOT in the {mood} category?",
            options=[movies[2].title, movies[3].title, DECOY_TITLE, movies[4].title],
            correct_answer=DECOY_TITLE,
            type=QuestionType.MULTIPLE_CHOICE,
            difficulty=Difficulty.MEDIUM,
            points=15,
            explanation=f"{DECOY_TITLE} is a drama film and doesn't fit the {mood} category.",
        ),
        QuizQuestion(
            question=f"Based on the poster, which movie would you most likely watch when feeling {mood}?",
            options=_titles(movies[5:9]),
            correct_answer=movies[5].title,
            image=_poster(movies[5]),
            type=QuestionType.IMAGE_BASED,
            difficulty=Difficulty.HARD,
            points=20,
            explanation=f"{movies[5].title} is a great choice for a {mood} mood with its {flavor}.",
        ),
        QuizQuestion(
            question=f'True or False: The movie "{seventh.title}" has a rating higher than {RATING_PIVOT:.1f}.',
            options=["True", "False"],
            correct_answer="True" if seventh.vote_average > RATING_PIVOT else "False",
            type=QuestionType.TRUE_FALSE,
            difficulty=Difficulty.MEDIUM,
            points=15,
            explanation=(
                f"{seventh.title} has a rating of {seventh.vote_average:.1f}, which is "
                f"{'higher than' if seventh.vote_average > RATING_PIVOT else 'not higher than'} {RATING_PIVOT:.1f}."
            ),
        ),
        QuizQuestion(
            question="Which movie has the most intriguing plot based on this overview?",
            options=_titles(movies[7:11]),
            correct_answer=movies[7].title,
            type=QuestionType.MULTIPLE_CHOICE,
            difficulty=Difficulty.HARD,
            points=20,
            explanation=f'While subjective, {movies[7].title} is known for its compelling storyline: "{overview}..."',
        ),
    ]


def generate_questions(
    movies: Sequence[CatalogMovie],
    mood: str,
    rng: Optional[random.Random] = None,
) -> list[QuizQuestion]:
    questions = build_questions(movies, mood)
    (rng or random).shuffle(questions)
    return questions


# ─── Session ──────────────────────────────────────────────

class QuizSession:
    def __init__(
        self,
        questions: list[QuizQuestion],
        mood: str = "",
        mode: QuizMode = QuizMode.REGULAR,
        time_limit: Optional[int] = None,
        explanation_delay: Optional[float] = None,
        session_id: Optional[str] = None,
        profile_id: str = "default",
    ):
        if not questions:
            raise QuizGenerationError("A quiz needs at least one question")
        self.id = session_id or uuid.uuid4().hex
        self.profile_id = profile_id
        self.questions = questions
        self.mood = mood
        self.mode = QuizMode(mode)
        self.time_limit = settings.QUIZ_TIME_LIMIT if time_limit is None else time_limit
        self.explanation_delay = (
            settings.QUIZ_EXPLANATION_DELAY if explanation_delay is None else explanation_delay
        )

        self.index = 0
        self.score = 0  # correct answers
        self.earned_points = 0
        self.phase = QuizPhase.AWAITING_ANSWER
        self.selected_answer: Optional[str] = None
        self.last_correct: Optional[bool] = None
        self.time_left: float = float(self.time_limit)
        self.explanation_left: float = 0.0
        self.recorded = False

    @property
    def timed(self) -> bool:
        return self.mode == QuizMode.TIMED

    @property
    def completed(self) -> bool:
        return self.phase == QuizPhase.COMPLETED

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.completed:
            return None
        return self.questions[self.index]

    def answer(self, option: str) -> int:
        """Select an answer for the current question. Returns points awarded."""
        if self.phase != QuizPhase.AWAITING_ANSWER:
            raise QuizStateError(f"Cannot answer while {self.phase.value}")

        question = self.questions[self.index]
        self.selected_answer = option
        self.last_correct = option == question.correct_answer

        awarded = 0
        if self.last_correct:
            awarded = question.points
            if self.timed:
                awarded += math.floor(self.time_left / TIME_BONUS_DIVISOR)
            self.score += 1
            self.earned_points += awarded

        self.phase = QuizPhase.SHOWING_EXPLANATION
        self.explanation_left = self.explanation_delay
        return awarded

    def tick(self, seconds: float = 1.0) -> QuizPhase:
        """Advance the clock. Drives both the per-question timer and the explanation delay."""
        if self.phase == QuizPhase.AWAITING_ANSWER and self.timed:
            self.time_left = max(self.time_left - seconds, 0.0)
            if self.time_left <= 0:
                logger.debug(f"Quiz {self.id}: question {self.index + 1} timed out")
                self._advance()
        elif self.phase == QuizPhase.SHOWING_EXPLANATION:
            self.explanation_left = max(self.explanation_left - seconds, 0.0)
            if self.explanation_left <= 0:
                self._advance()
        return self.phase

    def _advance(self) -> None:
        if self.index < len(self.questions) - 1:
            self.index += 1
            self.selected_answer = None
            self.last_correct = None
            self.time_left = float(self.time_limit)
            self.explanation_left = 0.0
            self.phase = QuizPhase.AWAITING_ANSWER
        else:
            self.phase = QuizPhase.COMPLETED
            logger.info(f"🎉 Quiz {self.id} completed: {self.score}/{len(self.questions)}")

    def view(self, reveal: bool = False) -> dict:
        """Client-facing snapshot. Hides the answer until the explanation is shown."""
        question = self.current_question
        payload = None
        if question is not None:
            show = reveal or self.phase == QuizPhase.SHOWING_EXPLANATION
            payload = question.model_dump(mode="json")
            if not show:
                payload.pop("correct_answer")
                payload.pop("explanation")
        return {
            "id": self.id,
            "mood": self.mood,
            "mode": self.mode.value,
            "phase": self.phase.value,
            "index": self.index,
            "total": len(self.questions),
            "score": self.score,
            "earned_points": self.earned_points,
            "time_left": self.time_left if self.timed else None,
            "selected_answer": self.selected_answer,
            "last_correct": self.last_correct,
            "question": payload,
        }


class QuizRegistry:
    """Process-local store of running sessions, oldest evicted first."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = settings.QUIZ_SESSION_LIMIT if limit is None else limit
        self._sessions: OrderedDict[str, QuizSession] = OrderedDict()

    def add(self, session: QuizSession) -> QuizSession:
        self._sessions[session.id] = session
        while len(self._sessions) > self.limit:
            self._sessions.popitem(last=False)
        return session

    def get(self, session_id: str) -> Optional[QuizSession]:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


quiz_registry = QuizRegistry()


# ─── Completion ───────────────────────────────────────────

async def record_quiz_result(
    state: AppState,
    session: QuizSession,
    today: date,
    ledger: Optional[ProgressLedger] = None,
) -> None:
    """Fold a finished session into QuizStats, achievements and points."""
    if not session.completed:
        raise QuizStateError("Quiz is not completed yet")
    if session.recorded:
        raise QuizStateError("Quiz result already recorded")

    ledger = ledger or ProgressLedger(state)
    stats = state.quiz_stats
    total = len(session.questions)
    is_new_day = stats.last_quiz_date != today

    stats.total_quizzes += 1
    stats.correct_answers += session.score
    stats.total_questions += total
    stats.best_score = max(stats.best_score, session.score)
    if is_new_day:
        stats.streaks += 1
    stats.last_quiz_date = today
    await state.save_quiz_stats()
    session.recorded = True

    if session.score == total:
        await ledger.unlock_achievement(Achievement.QUIZ_MASTER)
    if is_new_day and stats.streaks >= QUIZ_STREAK_TARGET:
        await ledger.unlock_achievement(Achievement.QUIZ_STREAK)

    await ledger.award_points(session.earned_points)
    state.notifier.success(
        "Quiz Completed! 🎉",
        f"You scored {session.score}/{total} and earned {session.earned_points} points!",
    )
