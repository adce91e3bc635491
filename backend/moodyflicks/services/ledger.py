"""
MoodyFlicks - Progress Ledger
Points, watched/rated/saved movie lists and achievements.

Achievement thresholds for watched-5 and critic compare the list size to an
exact count, so they fire on the transition and never retroactively.
"""

import logging
import math

from moodyflicks.schemas import Achievement, ProgressSummary, UserProgress
from moodyflicks.services.state import AppState

logger = logging.getLogger(__name__)

WATCH_POINTS = 10
WATCHED_5_THRESHOLD = 5
WATCHED_5_BONUS = 50

RATE_POINTS = 5
CRITIC_THRESHOLD = 10
CRITIC_BONUS = 30

FIRST_SAVE_POINTS = 5
COLLECTOR_THRESHOLD = 10
COLLECTOR_BONUS = 25

SHARE_POINTS = 15

POINTS_PER_LEVEL = 100
COMPLETION_TARGET = 20  # watched movies for 100% journey completion

ACHIEVEMENT_DESCRIPTIONS = {
    Achievement.SHARING: "Social Butterfly: You shared your first movie!",
    Achievement.WATCHED_5: "Movie Buff: You've watched 5 movies!",
    Achievement.CRITIC: "Movie Critic: You've rated 10 movies!",
    Achievement.COLLECTOR: "Movie Collector: You've saved 10 movies to your watchlist!",
    Achievement.CURATOR: "Movie Curator: You've started organizing your movie collection!",
    Achievement.DAILY_STREAK: "Daily Devotion: You've completed the daily challenge 3 days in a row!",
    Achievement.QUIZ_MASTER: "Quiz Master: You got a perfect score!",
    Achievement.QUIZ_STREAK: "Quiz Enthusiast: You've completed quizzes 3 days in a row!",
}


class ProgressLedger:
    def __init__(self, state: AppState):
        self.state = state
        self.notifier = state.notifier

    @property
    def progress(self) -> UserProgress:
        return self.state.progress

    async def award_points(self, amount: int) -> int:
        """Add points. Non-positive amounts are ignored. Returns the new total."""
        if amount <= 0:
            return self.progress.points
        self.progress.points += amount
        await self.state.save_points()
        return self.progress.points

    async def unlock_achievement(self, achievement: Achievement) -> bool:
        """Idempotent. Notifies only on the first unlock."""
        achievement = Achievement(achievement)
        if self.progress.has(achievement):
            return False
        self.progress.achievements.append(achievement)
        await self.state.save_achievements()
        logger.info(f"🏆 Achievement unlocked: {achievement.value}")
        self.notifier.achievement(ACHIEVEMENT_DESCRIPTIONS[achievement])
        return True

    async def mark_watched(self, movie_id: int) -> bool:
        watched = self.progress.watched_movie_ids
        if movie_id in watched:
            self.notifier.info("Already Watched", "You've already marked this movie as watched.")
            return False

        watched.append(movie_id)
        await self.state.save_watched()
        await self.award_points(WATCH_POINTS)
        self.notifier.success(
            "Movie Marked as Watched! ✅",
            f"You've earned {WATCH_POINTS} points for your movie journey.",
        )

        if len(watched) == WATCHED_5_THRESHOLD and not self.progress.has(Achievement.WATCHED_5):
            await self.unlock_achievement(Achievement.WATCHED_5)
            await self.award_points(WATCHED_5_BONUS)
        return True

    async def rate_movie(self, movie_id: int, liked: bool) -> bool:
        rated = self.progress.rated_movie_ids
        if movie_id in rated:
            self.notifier.info("Already Rated", "You've already rated this movie.")
            return False

        rated.append(movie_id)
        await self.state.save_rated()
        await self.award_points(RATE_POINTS)
        self.notifier.success(
            "You liked this movie! 👍" if liked else "You disliked this movie 👎",
            f"You've earned {RATE_POINTS} points for rating.",
        )

        if len(rated) == CRITIC_THRESHOLD and not self.progress.has(Achievement.CRITIC):
            await self.unlock_achievement(Achievement.CRITIC)
            await self.award_points(CRITIC_BONUS)
        return True

    async def toggle_saved(self, movie_id: int) -> bool:
        """Save or unsave a movie. Returns True when the movie is now saved."""
        saved = self.progress.saved_movie_ids
        if movie_id in saved:
            saved.remove(movie_id)
            await self.state.save_saved()
            self.notifier.info("Movie Removed", "Movie has been removed from your watchlist.")
            return False

        was_empty = not saved
        saved.append(movie_id)
        await self.state.save_saved()
        if was_empty:
            await self.award_points(FIRST_SAVE_POINTS)
        self.notifier.success("Movie Saved! 🎬", "Added to your watchlist for later.")

        if len(saved) >= COLLECTOR_THRESHOLD and not self.progress.has(Achievement.COLLECTOR):
            await self.unlock_achievement(Achievement.COLLECTOR)
            await self.award_points(COLLECTOR_BONUS)
        return True

    async def record_share(self, movie_id: int) -> bool:
        """First share ever unlocks the sharing achievement and its points."""
        if self.progress.has(Achievement.SHARING):
            logger.debug(f"Share of {movie_id} ignored, sharing already unlocked")
            return False
        await self.unlock_achievement(Achievement.SHARING)
        await self.award_points(SHARE_POINTS)
        return True

    def summary(self) -> ProgressSummary:
        progress = self.progress
        completion = math.floor(len(progress.watched_movie_ids) / COMPLETION_TARGET * 100 + 0.5)
        return ProgressSummary(
            points=progress.points,
            level=progress.points // POINTS_PER_LEVEL + 1,
            total_achievements=len(progress.achievements),
            completion_percentage=min(completion, 100),
        )
