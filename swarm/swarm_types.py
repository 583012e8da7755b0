"""Data types for the chunk swarm simulation."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Cooperation(Enum):
    """Whether and when a peer uploads to others."""

    ALTRUISTIC = "altruistic"  # always uploads
    SELFISH = "selfish"  # uploads only until its own download completes
    FREERIDER = "freerider"  # never uploads


class Strategy(Enum):
    """Order in which a peer considers chunks to download."""

    RAREST_FIRST = "rarest-first"
    MOST_COMMON_FIRST = "most-common-first"
    UNIFORM = "uniform"


class SpeedTier(Enum):
    """Bandwidth class of a peer."""

    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


@dataclass
class Chunk:
    """One indivisible piece of the distributed file."""

    index: int
    number_possessing_peers: int
    completion_round: Optional[int] = None  # set once every peer has it

    def __str__(self) -> str:
        return f"Chunk({self.index}, held by {self.number_possessing_peers})"


@dataclass
class File:
    """The distributed file: a fixed sequence of chunks."""

    chunks: List[Chunk]

    @classmethod
    def create(cls, number_chunks: int, number_seeds: int) -> "File":
        """Build a file whose chunks are initially held by the seeds only."""
        return cls([Chunk(i, number_seeds) for i in range(number_chunks)])

    def __str__(self) -> str:
        return f"File({len(self.chunks)} chunks)"


@dataclass
class Transfer:
    """A chunk download in flight between two peers."""

    chunk_index: int
    source_peer: int
    target_peer: int
    downloaded_size: int  # cumulative units delivered
    current_size: int  # units delivered in the current round

    def is_finished(self, chunk_size: int) -> bool:
        """Check whether the whole chunk has arrived."""
        return self.downloaded_size >= chunk_size

    def __str__(self) -> str:
        return (
            f"Transfer(chunk={self.chunk_index}, "
            f"{self.source_peer}->{self.target_peer}, {self.downloaded_size})"
        )


@dataclass
class Round:
    """Snapshot taken at the end of a round."""

    completed_peers: int
    completed_chunks: int
    exchanged_chunks: int = 0  # transfers started this round
    execution_time: float = 0.0  # wall-clock seconds, not simulated time

    def following(self) -> "Round":
        """Start the next round from this round's cumulative counters."""
        return Round(self.completed_peers, self.completed_chunks)

    def __str__(self) -> str:
        return (
            f"Round(peers={self.completed_peers}, chunks={self.completed_chunks}, "
            f"exchanged={self.exchanged_chunks}, time={self.execution_time:.6f}s)"
        )


@dataclass
class RunTotals:
    """Totals derived from the rounds of a finished run."""

    number_rounds: int = 0
    exchanged_chunks: int = 0
    execution_time: float = 0.0

    @classmethod
    def from_rounds(cls, rounds: List[Round]) -> "RunTotals":
        """Sum a run's round snapshots, excluding the initial one from the count."""
        return cls(
            number_rounds=len(rounds) - 1,
            exchanged_chunks=sum(r.exchanged_chunks for r in rounds),
            execution_time=sum(r.execution_time for r in rounds),
        )

    def __str__(self) -> str:
        return (
            f"{self.number_rounds} rounds, {self.exchanged_chunks} chunks exchanged, "
            f"{self.execution_time:.6f}s"
        )
