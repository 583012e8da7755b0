"""Observers notified of events while a distribution runs."""

from swarm_types import Round


class RunObserver:
    """Base observer: every hook does nothing unless overridden.

    The engine calls hooks synchronously in the order events happen.
    Observers may print or record but must not change the distribution.
    """

    def random_seed(self, seed: int) -> None:
        pass

    def chunk_size(self, chunk_size: int) -> None:
        pass

    def round_start(self, round_number: int) -> None:
        pass

    def chunk_transfer(
        self, chunk_index: int, transfer_size: int, source_peer: int, target_peer: int
    ) -> None:
        pass

    def peer_completed(self, peer_index: int) -> None:
        pass

    def chunk_completed(self, chunk_index: int) -> None:
        pass

    def round_end(self, round_number: int, round: Round) -> None:
        pass


class SilentObserver(RunObserver):
    """Reports nothing."""


class VerboseObserver(RunObserver):
    """Prints every event."""

    def __init__(self) -> None:
        self.round_number = 0

    def random_seed(self, seed: int) -> None:
        print(f"Random seed: {seed}")

    def chunk_size(self, chunk_size: int) -> None:
        print(f"Chunk size: {chunk_size}")

    def round_start(self, round_number: int) -> None:
        self.round_number = round_number
        print(f"[{round_number}] Start round")

    def chunk_transfer(
        self, chunk_index: int, transfer_size: int, source_peer: int, target_peer: int
    ) -> None:
        print(
            f"[{self.round_number}] Transfer {transfer_size} of chunk {chunk_index} "
            f"from peer {source_peer} to peer {target_peer}"
        )

    def peer_completed(self, peer_index: int) -> None:
        print(f"[{self.round_number}] Peer {peer_index}: ✓ complete")

    def chunk_completed(self, chunk_index: int) -> None:
        print(f"[{self.round_number}] Chunk {chunk_index} fully distributed")

    def round_end(self, round_number: int, round: Round) -> None:
        print(f"[{round_number}] End round ({round.execution_time:.6f}s)")


class SummaryObserver(RunObserver):
    """Prints the random seed and one line per finished round."""

    def random_seed(self, seed: int) -> None:
        print(f"Random seed: {seed}")

    def round_end(self, round_number: int, round: Round) -> None:
        print(f"[{round_number}] {round}")
