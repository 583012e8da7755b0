"""Peer state for the chunk swarm simulation."""

from typing import List, Optional
from swarm_types import Cooperation, Strategy, Transfer


class Peer:
    """A swarm member: possession bitmap plus its transfers in flight."""

    def __init__(
        self,
        index: int,
        number_chunks: int,
        is_seed: bool,
        cooperation: Cooperation,
        strategy: Strategy,
        speed: int,
    ) -> None:
        if is_seed and cooperation != Cooperation.ALTRUISTIC:
            raise ValueError(f"seed {index} must be altruistic")
        self.index = index
        self.cooperation = cooperation
        self.strategy = strategy
        self.speed = speed
        self.completion_round: Optional[int] = 0 if is_seed else None
        self.possessed_chunks: List[bool] = [is_seed] * number_chunks
        self.number_uploads = 0

        # Outbound transfers, at most one per (chunk, target); one inbound
        self.current_uploads: List[Transfer] = []
        self.current_download: Optional[Transfer] = None

    def is_complete(self) -> bool:
        """Check if this peer holds every chunk."""
        return self.completion_round is not None

    def serves(self) -> bool:
        """Check if the cooperation policy lets this peer upload right now."""
        if self.cooperation == Cooperation.ALTRUISTIC:
            return True
        if self.cooperation == Cooperation.SELFISH:
            return not self.is_complete()
        return False

    def available_capacity_for_chunk(self, chunk_index: int, target_peer: int) -> int:
        """Bandwidth this peer can still give target_peer for a chunk this round.

        Commitments to target_peer itself are not counted, so an existing
        transfer is re-sized against what the other targets use.
        """
        if not (self.serves() and self.possessed_chunks[chunk_index]):
            return 0
        used = sum(u.current_size for u in self.current_uploads if u.target_peer != target_peer)
        return max(0, self.speed - used)

    def _upload_position(self, chunk_index: int, target_peer: int) -> Optional[int]:
        for i, upload in enumerate(self.current_uploads):
            if upload.chunk_index == chunk_index and upload.target_peer == target_peer:
                return i
        return None

    def record_upload(self, transfer: Transfer) -> None:
        """Add or replace the outbound record for (chunk, target)."""
        position = self._upload_position(transfer.chunk_index, transfer.target_peer)
        if position is None:
            self.current_uploads.append(transfer)
        else:
            self.current_uploads[position] = transfer

    def upload_finished(self, chunk_index: int, target_peer: int) -> None:
        """Retire a delivered upload and count it."""
        position = self._upload_position(chunk_index, target_peer)
        if position is not None:
            self.number_uploads += 1
            del self.current_uploads[position]

    def withdraw_uploads(self) -> List[Transfer]:
        """Drop every outbound transfer without counting it."""
        withdrawn = self.current_uploads
        self.current_uploads = []
        return withdrawn

    def take_finished_download(self, chunk_size: int) -> Optional[Transfer]:
        """Mark a fully delivered chunk as possessed and clear the download."""
        download = self.current_download
        if download is None or not download.is_finished(chunk_size):
            return None
        self.possessed_chunks[download.chunk_index] = True
        self.current_download = None
        return download

    def has_every_chunk(self) -> bool:
        return all(self.possessed_chunks)

    def __str__(self) -> str:
        held = sum(1 for c in self.possessed_chunks if c)
        return (
            f"Peer({self.index}, {self.cooperation.value}, speed={self.speed}, "
            f"{held}/{len(self.possessed_chunks)} chunks)"
        )
