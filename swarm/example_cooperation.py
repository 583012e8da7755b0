"""Compare how cooperation policies share the upload burden."""

from collections import defaultdict
from typing import Dict, List
from distribution import Distribution
from run_observer import SilentObserver
from swarm_config import PeerDescriptor, SwarmConfig
from swarm_types import Cooperation


def run_cooperation_comparison(random_seed: int = 7) -> Dict[Cooperation, Dict[str, float]]:
    """Mix altruistic, selfish and freeriding peers and report per-policy statistics."""
    descriptors = [PeerDescriptor.from_string(text) for text in ["a", "s", "f"] * 4]
    config = SwarmConfig.from_descriptors(
        number_chunks=20,
        number_peers=14,
        number_seeds=2,
        speed_fast=4,
        speed_medium=2,
        speed_slow=1,
        descriptors=descriptors,
    )
    print(f"Created {config}\n")

    distribution = Distribution(config)
    rounds = distribution.run(random_seed, SilentObserver())

    uploads: Dict[Cooperation, List[int]] = defaultdict(list)
    completions: Dict[Cooperation, List[int]] = defaultdict(list)
    for peer in distribution.peers[config.number_seeds:]:
        uploads[peer.cooperation].append(peer.number_uploads)
        completions[peer.cooperation].append(peer.completion_round)

    stats: Dict[Cooperation, Dict[str, float]] = {}
    print(f"Finished after {len(rounds) - 1} rounds")
    print("=" * 60)
    for cooperation in Cooperation:
        if cooperation not in uploads:
            continue
        count = len(uploads[cooperation])
        stats[cooperation] = {
            "mean_uploads": sum(uploads[cooperation]) / count,
            "mean_completion": sum(completions[cooperation]) / count,
        }
        print(
            f"{cooperation.value:>10}: peers={count}, "
            f"mean uploads={stats[cooperation]['mean_uploads']:.1f}, "
            f"mean completion round={stats[cooperation]['mean_completion']:.1f}"
        )
    return stats


if __name__ == "__main__":
    run_cooperation_comparison()
