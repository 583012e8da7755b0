import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1] / "swarm"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from swarm_peer import Peer  # noqa: E402
from swarm_types import Cooperation, Strategy, Transfer  # noqa: E402


def _peer(cooperation=Cooperation.ALTRUISTIC, is_seed=True, speed=4, chunks=3):
    return Peer(0, chunks, is_seed, cooperation, Strategy.RAREST_FIRST, speed)


def test_seed_starts_complete_with_every_chunk():
    seed = _peer()
    assert seed.is_complete()
    assert seed.completion_round == 0
    assert seed.has_every_chunk()

    leecher = _peer(is_seed=False)
    assert not leecher.is_complete()
    assert leecher.possessed_chunks == [False, False, False]


def test_seed_must_be_altruistic():
    with pytest.raises(ValueError):
        _peer(cooperation=Cooperation.SELFISH)


def test_capacity_depends_on_policy_and_possession():
    assert _peer().available_capacity_for_chunk(1, target_peer=5) == 4

    freerider = _peer(Cooperation.FREERIDER, is_seed=False)
    freerider.possessed_chunks[1] = True
    assert freerider.available_capacity_for_chunk(1, 5) == 0

    selfish = _peer(Cooperation.SELFISH, is_seed=False)
    selfish.possessed_chunks[1] = True
    assert selfish.available_capacity_for_chunk(1, 5) == 4
    assert selfish.available_capacity_for_chunk(0, 5) == 0
    selfish.completion_round = 3
    assert selfish.available_capacity_for_chunk(1, 5) == 0


def test_capacity_ignores_commitment_to_same_target():
    seed = _peer(speed=4)
    seed.record_upload(Transfer(0, 0, 7, downloaded_size=3, current_size=3))

    assert seed.available_capacity_for_chunk(1, target_peer=8) == 1
    assert seed.available_capacity_for_chunk(0, target_peer=7) == 4

    seed.record_upload(Transfer(1, 0, 8, downloaded_size=1, current_size=1))
    assert seed.available_capacity_for_chunk(2, target_peer=9) == 0


def test_record_upload_replaces_same_chunk_and_target():
    seed = _peer()
    seed.record_upload(Transfer(0, 0, 7, 1, 1))
    seed.record_upload(Transfer(0, 0, 7, 3, 2))
    seed.record_upload(Transfer(1, 0, 7, 1, 1))

    assert len(seed.current_uploads) == 2
    assert seed.current_uploads[0].downloaded_size == 3


def test_upload_finished_counts_only_known_uploads():
    seed = _peer()
    seed.record_upload(Transfer(2, 0, 7, 4, 4))

    seed.upload_finished(1, 7)
    assert seed.number_uploads == 0

    seed.upload_finished(2, 7)
    assert seed.number_uploads == 1
    assert seed.current_uploads == []


def test_take_finished_download_marks_possession():
    leecher = _peer(is_seed=False)
    leecher.current_download = Transfer(1, 0, 0, downloaded_size=2, current_size=2)

    assert leecher.take_finished_download(chunk_size=4) is None
    assert not leecher.possessed_chunks[1]

    leecher.current_download.downloaded_size = 4
    finished = leecher.take_finished_download(chunk_size=4)
    assert finished.chunk_index == 1
    assert leecher.possessed_chunks[1]
    assert leecher.current_download is None


def test_withdraw_uploads_does_not_count_them():
    selfish = _peer(Cooperation.SELFISH, is_seed=False)
    selfish.record_upload(Transfer(0, 0, 3, 1, 1))
    selfish.record_upload(Transfer(1, 0, 4, 1, 1))

    withdrawn = selfish.withdraw_uploads()

    assert [t.target_peer for t in withdrawn] == [3, 4]
    assert selfish.current_uploads == []
    assert selfish.number_uploads == 0
