"""Basic swarm demonstration: one seed, rarest-first downloaders."""

from typing import List
from distribution import Distribution
from run_observer import SummaryObserver
from swarm_config import SwarmConfig
from swarm_types import Round, RunTotals


def run_basic_swarm(random_seed: int = 42) -> List[Round]:
    """Distribute a 10-chunk file from one seed to nine peers."""
    config = SwarmConfig.from_counts(number_chunks=10, number_peers=10, number_seeds=1)
    print(f"Created {config}\n")

    distribution = Distribution(config)
    rounds = distribution.run(random_seed, SummaryObserver())

    # Print statistics
    print(f"\n{'=' * 60}")
    print(f"Final Statistics: {RunTotals.from_rounds(rounds)}")
    print("=" * 60)
    for peer in distribution.peers:
        print(
            f"Peer {peer.index}: Completed in round {peer.completion_round}, "
            f"Uploaded={peer.number_uploads}"
        )
    return rounds


if __name__ == "__main__":
    run_basic_swarm()
