# Sliding-window burst detector for rapid prompts

from app.types import SessionActivity


class SpamDetector:
    """
    Count observations in a trailing window that slides with every call.

    Any `threshold` observations spanning at most `window_seconds` count as a
    burst; there are no wall-clock buckets. Timestamps live on the
    SessionActivity passed in and are never persisted.
    """

    def __init__(self, threshold: int, window_seconds: float):
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.threshold = threshold
        self.window_seconds = window_seconds

    def observe(self, session: SessionActivity, now: float) -> bool:
        """
        Record one observation and report whether the threshold is reached.

        Args:
            session: Session whose timestamps are updated in place
            now: Observation time in seconds since the epoch

        Returns:
            bool: True iff the pruned window holds at least `threshold` entries
        """
        timestamps = session.prompt_timestamps
        # Keep the sequence non-decreasing if the clock steps backwards
        if timestamps and now < timestamps[-1]:
            now = timestamps[-1]

        cutoff = now - self.window_seconds
        recent = [t for t in timestamps if t >= cutoff]
        recent.append(now)
        session.prompt_timestamps = recent
        return len(recent) >= self.threshold
