"""Round-by-round distribution of a chunked file through a swarm."""

from asimpy import Environment, Process
from typing import List, Optional, Tuple
import random
import time
from run_observer import RunObserver, SilentObserver
from swarm_config import SwarmConfig
from swarm_peer import Peer
from swarm_types import File, Round, Strategy, Transfer


def _shuffle_range(rng: random.Random, items: List[int], start: int, stop: int) -> None:
    """Shuffle items[start:stop] in place."""
    part = items[start:stop]
    rng.shuffle(part)
    items[start:stop] = part


class Distribution:
    """Owns the file and peers of one run and advances them round by round."""

    def __init__(self, config: SwarmConfig) -> None:
        self.file = File.create(config.number_chunks, config.number_seeds)
        self.peers: List[Peer] = [
            Peer(
                i,
                config.number_chunks,
                i < config.number_seeds,
                config.peer_cooperation[i],
                config.peer_strategies[i],
                config.peer_speeds[i],
            )
            for i in range(config.number_peers)
        ]
        self.number_seeds = config.number_seeds
        self.chunk_size = config.chunk_size

        # Orderings carried from round to round; shuffled in place
        self._peer_order: List[int] = list(range(config.number_peers))
        self._chunk_order: List[int] = list(range(config.number_chunks))
        self._has_run = False

    def is_complete(self) -> bool:
        """Check if every peer holds the whole file."""
        return all(peer.is_complete() for peer in self.peers)

    def run(
        self, random_seed: Optional[int] = None, observer: Optional[RunObserver] = None
    ) -> List[Round]:
        """Run until every peer is complete and return one Round per boundary.

        The first entry is the snapshot before round 1. Without a seed, one
        is taken from the wall clock and reported to the observer.
        """
        if self._has_run:
            raise RuntimeError("a distribution can only be run once")
        self._has_run = True

        observer = observer or SilentObserver()
        if random_seed is None:
            random_seed = int(time.time())
        observer.random_seed(random_seed)
        observer.chunk_size(self.chunk_size)

        rounds = [Round(completed_peers=self.number_seeds, completed_chunks=0)]
        env = Environment()
        RoundClock(env, self, random.Random(random_seed), observer, rounds)
        env.run()
        return rounds

    def step(
        self,
        round_number: int,
        rng: random.Random,
        previous: Round,
        observer: RunObserver,
    ) -> Round:
        """Schedule, transfer and complete chunks for one round."""
        observer.round_start(round_number)
        started = time.perf_counter()
        current = previous.following()
        seeds = self.number_seeds

        # Seeds and downloaders are shuffled separately so seeds never download
        _shuffle_range(rng, self._peer_order, 0, seeds)
        _shuffle_range(rng, self._peer_order, seeds, len(self._peer_order))
        downloaders = self._peer_order[seeds:]
        sources = downloaders + self._peer_order[:seeds]

        # Stable sort keeps last round's order among equally rare chunks
        self._chunk_order.sort(key=lambda c: self.file.chunks[c].number_possessing_peers)

        for peer_index in downloaders:
            peer = self.peers[peer_index]
            if peer.is_complete():
                continue
            if peer.current_download is not None:
                self._continue_download(peer, observer)
                continue
            self._shuffle_ties(rng)
            if self._start_download(peer, sources, rng, observer):
                current.exchanged_chunks += 1

        completed_peers, completed_chunks = self._complete_downloads(round_number, observer)
        current.completed_peers += completed_peers
        current.completed_chunks += completed_chunks
        current.execution_time = time.perf_counter() - started
        observer.round_end(round_number, current)
        return current

    def _continue_download(self, peer: Peer, observer: RunObserver) -> None:
        """Move the next slice of an active download, re-sized to current capacity."""
        transfer = peer.current_download
        source = self.peers[transfer.source_peer]
        size = min(
            self.chunk_size - transfer.downloaded_size,
            source.available_capacity_for_chunk(transfer.chunk_index, peer.index),
            peer.speed,
        )
        if size <= 0:
            raise RuntimeError(f"{transfer} has no capacity left")

        observer.chunk_transfer(transfer.chunk_index, size, transfer.source_peer, peer.index)
        transfer.current_size = size
        transfer.downloaded_size += size
        source.record_upload(transfer)

    def _candidate_chunks(self, peer: Peer, rng: random.Random) -> List[int]:
        """Chunks in the order this peer's strategy considers them."""
        if peer.strategy == Strategy.RAREST_FIRST:
            return self._chunk_order
        if peer.strategy == Strategy.MOST_COMMON_FIRST:
            return self._chunk_order[::-1]
        return rng.sample(self._chunk_order, len(self._chunk_order))

    def _start_download(
        self,
        peer: Peer,
        sources: List[int],
        rng: random.Random,
        observer: RunObserver,
    ) -> bool:
        """Start at most one new download for a peer; report whether one started."""
        for chunk_index in self._candidate_chunks(peer, rng):
            if peer.possessed_chunks[chunk_index]:
                continue
            for source_index in sources:
                source = self.peers[source_index]
                size = min(
                    peer.speed,
                    source.available_capacity_for_chunk(chunk_index, peer.index),
                    self.chunk_size,
                )
                if size <= 0:
                    continue

                observer.chunk_transfer(chunk_index, size, source_index, peer.index)
                transfer = Transfer(
                    chunk_index=chunk_index,
                    source_peer=source_index,
                    target_peer=peer.index,
                    downloaded_size=size,
                    current_size=size,
                )
                peer.current_download = transfer
                source.record_upload(transfer)
                return True
        return False

    def _complete_downloads(
        self, round_number: int, observer: RunObserver
    ) -> Tuple[int, int]:
        """Apply this round's finished downloads; return (peers, chunks) completed.

        Targets of uploads withdrawn from a peer that stops serving lose
        their partial chunk and search again next round.
        """
        number_peers = len(self.peers)
        completed_peers = 0
        completed_chunks = 0
        finished: List[Transfer] = []
        newly_complete: List[Peer] = []

        for peer in self.peers:
            transfer = peer.take_finished_download(self.chunk_size)
            if transfer is None:
                continue
            chunk = self.file.chunks[transfer.chunk_index]
            chunk.number_possessing_peers += 1
            if chunk.number_possessing_peers == number_peers:
                observer.chunk_completed(chunk.index)
                chunk.completion_round = round_number
                completed_chunks += 1
            if peer.has_every_chunk():
                observer.peer_completed(peer.index)
                peer.completion_round = round_number
                completed_peers += 1
                newly_complete.append(peer)
            finished.append(transfer)

        # Sources are released only after every target has been updated
        for transfer in finished:
            self.peers[transfer.source_peer].upload_finished(
                transfer.chunk_index, transfer.target_peer
            )

        # A peer that stops serving on completion abandons its uploads
        for peer in newly_complete:
            if peer.serves():
                continue
            for transfer in peer.withdraw_uploads():
                self.peers[transfer.target_peer].current_download = None

        return completed_peers, completed_chunks

    def _shuffle_ties(self, rng: random.Random) -> None:
        """Shuffle each run of equally rare chunks in the rarity ordering."""
        order = self._chunk_order
        counts = [self.file.chunks[c].number_possessing_peers for c in order]
        start = 0
        while start < len(order):
            stop = start + 1
            while stop < len(order) and counts[stop] == counts[start]:
                stop += 1
            if stop - start > 1:
                _shuffle_range(rng, order, start, stop)
            start = stop

    def __str__(self) -> str:
        done = sum(1 for peer in self.peers if peer.is_complete())
        return f"Distribution({done}/{len(self.peers)} peers complete, {self.file})"


class RoundClock(Process):
    """Steps a distribution once per unit of simulated time until it completes."""

    def init(
        self,
        distribution: Distribution,
        rng: random.Random,
        observer: RunObserver,
        rounds: List[Round],
    ) -> None:
        self.distribution = distribution
        self.rng = rng
        self.observer = observer
        self.rounds = rounds

    async def run(self) -> None:
        """Run rounds until every peer has completed."""
        number_peers = len(self.distribution.peers)
        while self.rounds[-1].completed_peers < number_peers:
            round_number = len(self.rounds)
            self.rounds.append(
                self.distribution.step(round_number, self.rng, self.rounds[-1], self.observer)
            )
            await self.timeout(1)
