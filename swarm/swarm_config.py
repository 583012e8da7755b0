"""Swarm configuration: population, per-peer attributes and chunk size."""

from dataclasses import dataclass, field
from math import gcd, lcm
from typing import List, Tuple
from swarm_types import Cooperation, SpeedTier, Strategy

MAX_NORMALIZED_SPEED = 1000

_COOPERATION_CODES = {"s": Cooperation.SELFISH, "f": Cooperation.FREERIDER}
_STRATEGY_CODES = {"m": Strategy.MOST_COMMON_FIRST, "u": Strategy.UNIFORM}
_SPEED_CODES = {"m": SpeedTier.MEDIUM, "s": SpeedTier.SLOW}


@dataclass
class PeerDescriptor:
    """Cooperation, strategy and speed tier requested for one peer."""

    cooperation: Cooperation = Cooperation.ALTRUISTIC
    strategy: Strategy = Strategy.RAREST_FIRST
    speed: SpeedTier = SpeedTier.FAST

    @classmethod
    def from_string(cls, text: str) -> "PeerDescriptor":
        """Parse a descriptor such as "sms" (selfish, most-common-first, slow).

        Each position is a lower-case single-character code; any other or
        missing character falls back to altruistic, rarest-first and fast.
        """
        return cls(
            cooperation=_COOPERATION_CODES.get(text[0:1], Cooperation.ALTRUISTIC),
            strategy=_STRATEGY_CODES.get(text[1:2], Strategy.RAREST_FIRST),
            speed=_SPEED_CODES.get(text[2:3], SpeedTier.FAST),
        )

    def __str__(self) -> str:
        return f"Peer({self.cooperation.value}, {self.strategy.value}, {self.speed.value})"


def load_descriptors(path: str) -> List[PeerDescriptor]:
    """Read whitespace-separated peer descriptors from a file.

    Text after "#" on a line is ignored. Errors opening or reading the
    file propagate to the caller.
    """
    descriptors: List[PeerDescriptor] = []
    with open(path, "r", encoding="utf-8") as reader:
        for line in reader:
            line = line.split("#", 1)[0]
            descriptors.extend(PeerDescriptor.from_string(word) for word in line.split())
    return descriptors


def normalize_speeds(fast: int, medium: int, slow: int) -> Tuple[int, int, int, int]:
    """Reduce the speed tiers by their common divisor and derive the chunk size.

    Returns (fast, medium, slow, chunk_size). The chunk size is the least
    common multiple of the reduced tiers, so every tier moves a whole
    chunk in a whole number of rounds.
    """
    divisor = gcd(gcd(slow, medium), fast)
    fast, medium, slow = fast // divisor, medium // divisor, slow // divisor
    if fast > MAX_NORMALIZED_SPEED:
        raise ValueError(
            f"normalized fast speed {fast} exceeds {MAX_NORMALIZED_SPEED}"
        )
    chunk_size = lcm(slow, medium, fast)
    return fast, medium, slow, chunk_size


def _check_common(
    number_chunks: int,
    number_peers: int,
    number_seeds: int,
    speed_fast: int,
    speed_medium: int,
    speed_slow: int,
) -> None:
    """Reject parameters that no swarm can be built from."""
    if number_chunks <= 0:
        raise ValueError("number of chunks must be positive")
    if number_seeds <= 0:
        raise ValueError("number of seeds must be positive")
    if number_peers <= number_seeds:
        raise ValueError("number of peers must exceed number of seeds")
    if speed_slow <= 0:
        raise ValueError("slow speed must be positive")
    if speed_medium < speed_slow:
        raise ValueError("medium speed must not be below slow speed")
    if speed_fast < speed_medium:
        raise ValueError("fast speed must not be below medium speed")


@dataclass
class SwarmConfig:
    """Validated description of a swarm, one attribute vector entry per peer."""

    number_chunks: int
    number_peers: int
    number_seeds: int
    chunk_size: int
    peer_cooperation: List[Cooperation] = field(default_factory=list)
    peer_strategies: List[Strategy] = field(default_factory=list)
    peer_speeds: List[int] = field(default_factory=list)

    @classmethod
    def from_counts(
        cls,
        number_chunks: int,
        number_peers: int,
        number_seeds: int = 1,
        speed_fast: int = 1,
        speed_medium: int = 1,
        speed_slow: int = 1,
        number_selfish: int = 0,
        number_freeriders: int = 0,
        strategy: Strategy = Strategy.RAREST_FIRST,
    ) -> "SwarmConfig":
        """Build a swarm from counts of each cooperation class.

        Seeds come first, then altruistic, selfish and freerider blocks.
        All peers run at the fast tier and non-seeds share one strategy.
        """
        _check_common(
            number_chunks, number_peers, number_seeds, speed_fast, speed_medium, speed_slow
        )
        if number_seeds + number_selfish + number_freeriders > number_peers:
            raise ValueError(
                "seeds, selfish peers and freeriders outnumber the peers"
            )
        fast, _, _, chunk_size = normalize_speeds(speed_fast, speed_medium, speed_slow)

        number_altruistic = number_peers - number_selfish - number_freeriders
        cooperation = (
            [Cooperation.ALTRUISTIC] * number_altruistic
            + [Cooperation.SELFISH] * number_selfish
            + [Cooperation.FREERIDER] * number_freeriders
        )
        strategies = [Strategy.RAREST_FIRST] * number_seeds + [strategy] * (
            number_peers - number_seeds
        )

        return cls(
            number_chunks=number_chunks,
            number_peers=number_peers,
            number_seeds=number_seeds,
            chunk_size=chunk_size,
            peer_cooperation=cooperation,
            peer_strategies=strategies,
            peer_speeds=[fast] * number_peers,
        )

    @classmethod
    def from_descriptors(
        cls,
        number_chunks: int,
        number_peers: int,
        number_seeds: int,
        speed_fast: int,
        speed_medium: int,
        speed_slow: int,
        descriptors: List[PeerDescriptor],
    ) -> "SwarmConfig":
        """Build a swarm from one descriptor per non-seed peer.

        Seeds are altruistic, rarest-first and fast. Peers left without a
        descriptor are altruistic, rarest-first and slow.
        """
        _check_common(
            number_chunks, number_peers, number_seeds, speed_fast, speed_medium, speed_slow
        )
        if len(descriptors) > number_peers - number_seeds:
            raise ValueError(
                f"{len(descriptors)} peer descriptors given for "
                f"{number_peers - number_seeds} non-seed peers"
            )
        fast, medium, slow, chunk_size = normalize_speeds(
            speed_fast, speed_medium, speed_slow
        )
        tier_speeds = {SpeedTier.FAST: fast, SpeedTier.MEDIUM: medium, SpeedTier.SLOW: slow}

        unfilled = number_peers - number_seeds - len(descriptors)
        cooperation = [Cooperation.ALTRUISTIC] * number_seeds
        strategies = [Strategy.RAREST_FIRST] * number_seeds
        speeds = [fast] * number_seeds
        for descriptor in descriptors:
            cooperation.append(descriptor.cooperation)
            strategies.append(descriptor.strategy)
            speeds.append(tier_speeds[descriptor.speed])
        cooperation.extend([Cooperation.ALTRUISTIC] * unfilled)
        strategies.extend([Strategy.RAREST_FIRST] * unfilled)
        speeds.extend([slow] * unfilled)

        return cls(
            number_chunks=number_chunks,
            number_peers=number_peers,
            number_seeds=number_seeds,
            chunk_size=chunk_size,
            peer_cooperation=cooperation,
            peer_strategies=strategies,
            peer_speeds=speeds,
        )

    def __str__(self) -> str:
        return (
            f"Swarm({self.number_peers} peers, {self.number_seeds} seeds, "
            f"{self.number_chunks} chunks of {self.chunk_size})"
        )
