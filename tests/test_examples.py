import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1] / "swarm"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from example_basic_swarm import run_basic_swarm  # noqa: E402
from example_cooperation import run_cooperation_comparison  # noqa: E402
from swarm_types import Cooperation  # noqa: E402


def test_basic_swarm_example_completes(capsys):
    rounds = run_basic_swarm(random_seed=1)

    assert rounds[-1].completed_peers == 10
    assert rounds[-1].completed_chunks == 10
    assert "Final Statistics" in capsys.readouterr().out


def test_cooperation_example_reports_each_policy(capsys):
    stats = run_cooperation_comparison(random_seed=3)

    assert set(stats) == set(Cooperation)
    assert stats[Cooperation.FREERIDER]["mean_uploads"] == 0
    assert stats[Cooperation.ALTRUISTIC]["mean_uploads"] > 0
    assert "freerider" in capsys.readouterr().out
