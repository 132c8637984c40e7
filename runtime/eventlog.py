from bisect import bisect_left
from typing import List, Tuple
from engine.model import Event

class EventLog:
    """Append-only battle events, ordered by round, for replay and paging."""

    def __init__(self):
        self._log: List[Event] = []
        self._rounds: List[int] = []  # round of each logged event, non-decreasing

    def append_many(self, evts: List[Event]) -> Tuple[int, int]:
        """Append events and return (start_offset, end_offset)."""
        start = len(self._log)
        for e in evts:
            if self._rounds and e.round < self._rounds[-1]:
                raise ValueError(f"Event for round {e.round} logged after round {self._rounds[-1]}")
            self._log.append(e)
            self._rounds.append(e.round)
        return start, len(self._log) - 1

    def round_offset(self, round_no: int) -> int:
        """Offset of the first event of round_no or any later round."""
        return bisect_left(self._rounds, round_no)

    def page(self, offset: int = 0, limit: int = 1000, from_round: int = 0) -> Tuple[List[Event], int]:
        """Up to limit events from offset (or from the start of from_round, if later) and the next offset."""
        offset = max(0, offset, self.round_offset(from_round))
        chunk = self._log[offset: offset + limit]
        return chunk, offset + len(chunk)
