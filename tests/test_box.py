import sys
import os
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import ballotbox.box
from ballotbox.box import BallotBox, InvalidConfiguration
from ballotbox.candidate import InvalidCandidate
from ballotbox.vote import DuplicateVote


NAMES = ['Alice', 'Bob', 'Charlie']


@pytest.mark.parametrize('names', [
    ['Alice'],
    NAMES,
    ['Ann', 'Ann', 'Ann'],
    ('Bob', 'Alice'),
])
def test_initial_winner_first(names):
    box = BallotBox(names)
    assert box.get_winner() == names[0]
    assert box.get_winner_index() == 0
    assert box.vote_counts() == [0] * len(names)
    assert box.candidate_count == len(names)


@pytest.mark.parametrize('names', [
    [],
    (),
    'Alice',
    ['Alice', None],
    ['Alice', 3],
    42,
])
def test_invalid_configuration(names):
    with pytest.raises(InvalidConfiguration):
        BallotBox(names)


def test_invalid_configuration_is_value_error():
    with pytest.raises(ValueError):
        BallotBox([])


def test_vote_has_voted():
    box = BallotBox(NAMES)
    assert not box.has_voted('0xabc')
    box.vote('0xabc', 0)
    assert box.has_voted('0xabc')
    assert not box.has_voted('0xdef')
    assert box.voter_count == 1


@pytest.mark.parametrize(('first', 'second'), [
    (1, 1), (1, 0), (0, 2),
])
def test_duplicate_vote(first, second):
    box = BallotBox(NAMES)
    box.vote('addr1', first)
    counts_after_first = box.vote_counts()
    with pytest.raises(DuplicateVote, match='You have already voted!'):
        box.vote('addr1', second)
    assert box.vote_counts() == counts_after_first
    assert box.total_votes == 1


def test_duplicate_vote_message_exact():
    box = BallotBox(NAMES)
    box.vote('addr1', 1)
    with pytest.raises(DuplicateVote) as excinfo:
        box.vote('addr1', 1)
    assert str(excinfo.value) == 'You have already voted!'
    assert excinfo.value.voter == 'addr1'


@pytest.mark.parametrize('index', [-1, 3, 100, 1.0, '0', None, True])
def test_invalid_candidate(index):
    box = BallotBox(NAMES)
    box.vote('addr0', 2)
    with pytest.raises(InvalidCandidate):
        box.vote('addr1', index)
    assert box.vote_counts() == [0, 0, 1]
    assert not box.has_voted('addr1')


def test_invalid_candidate_checked_before_duplicate():
    box = BallotBox(NAMES)
    box.vote('addr1', 0)
    with pytest.raises(InvalidCandidate):
        box.vote('addr1', 5)


def test_sum_matches_voters():
    box = BallotBox(NAMES)
    n_voters = 50
    for i in range(n_voters):
        box.vote(f'voter{i}', i % 3)
    assert box.total_votes == n_voters
    assert sum(box.vote_counts()) == box.voter_count == n_voters
    assert box.vote_counts() == [17, 17, 16]


def test_winner_alice():
    box = BallotBox(NAMES)
    box.vote('addr1', 0)
    box.vote('addr2', 0)
    assert box.get_winner() == 'Alice'


def test_tie_goes_to_first():
    box = BallotBox(NAMES)
    box.vote('addr1', 0)
    box.vote('addr2', 1)
    assert box.vote_counts() == [1, 1, 0]
    assert box.get_winner() == 'Alice'
    assert [cand.name for cand in box.leaders()] == ['Alice', 'Bob']


def test_later_strict_maximum_wins():
    box = BallotBox(NAMES)
    box.vote('addr1', 0)
    box.vote('addr2', 2)
    box.vote('addr3', 2)
    assert box.get_winner() == 'Charlie'
    assert box.get_winner_index() == 2
    assert [cand.name for cand in box.leaders()] == ['Charlie']


def test_duplicate_names_distinct():
    box = BallotBox(['Ann', 'Ann'])
    box.vote('v1', 1)
    assert box.vote_counts() == [0, 1]
    assert box.get_winner_index() == 1
    assert box.get_winner() == 'Ann'


def test_voter_identity_opaque():
    box = BallotBox(NAMES)
    box.vote(('session', 1), 0)
    box.vote(0xdeadbeef, 1)
    box.vote(frozenset(['a']), 1)
    assert box.has_voted(('session', 1))
    assert box.has_voted(0xdeadbeef)
    with pytest.raises(DuplicateVote):
        box.vote(0xdeadbeef, 2)


def test_contract_aliases():
    box = BallotBox(NAMES)
    box.vote('addr1', 0)
    assert box.hasVoted('addr1')
    assert box.getWinner() == 'Alice'


def test_candidates_are_snapshots():
    box = BallotBox(NAMES)
    snapshot = box.candidates
    snapshot[0].vote_count = 100
    assert box.vote_counts() == [0, 0, 0]
    box.vote('v', 1)
    assert snapshot[1].vote_count == 0
    assert box.get_candidate(1).vote_count == 1


def test_get_candidate():
    box = BallotBox(NAMES)
    box.vote('v', 2)
    cand = box.get_candidate(2)
    assert (cand.name, cand.index, cand.vote_count) == ('Charlie', 2, 1)
    with pytest.raises(InvalidCandidate):
        box.get_candidate(3)


def test_ranking_results_summary():
    box = BallotBox(NAMES)
    for voter, index in [('a', 2), ('b', 1), ('c', 2), ('d', 0)]:
        box.vote(voter, index)
    assert [cand.name for cand in box.ranking()] == ['Charlie', 'Alice', 'Bob']
    assert box.results() == [('Alice', 1), ('Bob', 1), ('Charlie', 2)]
    assert box.summary() == {
        'candidates': [
            {'name': 'Alice', 'index': 0, 'votes': 1},
            {'name': 'Bob', 'index': 1, 'votes': 1},
            {'name': 'Charlie', 'index': 2, 'votes': 2},
        ],
        'total_votes': 4,
        'winner': 'Charlie',
    }


def test_counts_monotonic():
    box = BallotBox(NAMES)
    previous = box.vote_counts()
    for i in range(30):
        try:
            box.vote(f'v{i % 20}', i % 4)
        except (DuplicateVote, InvalidCandidate):
            pass
        current = box.vote_counts()
        assert all(now >= before for now, before in zip(current, previous))
        previous = current


def test_concurrent_distinct_voters():
    box = BallotBox(NAMES)
    n_voters = 200
    with ThreadPoolExecutor(max_workers=16) as executor:
        list(executor.map(
            lambda i: box.vote(f'voter{i}', 1), range(n_voters)
        ))
    assert box.vote_counts() == [0, n_voters, 0]
    assert box.voter_count == n_voters


def test_concurrent_same_voter():
    box = BallotBox(NAMES)
    n_threads = 16
    barrier = threading.Barrier(n_threads)
    outcomes = []
    outcomes_lock = threading.Lock()

    def cast(index):
        barrier.wait()
        try:
            box.vote('addr1', index % 3)
            result = 'ok'
        except DuplicateVote:
            result = 'duplicate'
        with outcomes_lock:
            outcomes.append(result)

    threads = [
        threading.Thread(target=cast, args=(i, )) for i in range(n_threads)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert outcomes.count('ok') == 1
    assert outcomes.count('duplicate') == n_threads - 1
    assert box.total_votes == 1


def test_debug_logging(caplog):
    box = BallotBox(NAMES)
    with caplog.at_level('DEBUG', logger=ballotbox.box.__name__):
        box.vote('addr1', 0)
        with pytest.raises(DuplicateVote):
            box.vote('addr1', 0)
    assert 'voted for candidate 0' in caplog.text
    assert 'rejecting repeated vote' in caplog.text


def test_names_read_only():
    box = BallotBox(NAMES)
    with pytest.raises(AttributeError):
        box.names = ('Mallory', )
    assert box.names == tuple(NAMES)
    assert box.get_winner() == 'Alice'


class LockStateHandler(logging.Handler):
    def __init__(self, box):
        super().__init__(level=logging.DEBUG)
        self.box = box
        self.locked_during = []

    def emit(self, record):
        self.locked_during.append(self.box._lock.locked())


def test_rejection_logged_outside_lock():
    box = BallotBox(NAMES)
    handler = LockStateHandler(box)
    box_logger = logging.getLogger(ballotbox.box.__name__)
    old_level = box_logger.level
    box_logger.addHandler(handler)
    box_logger.setLevel(logging.DEBUG)
    try:
        box.vote('addr1', 0)
        with pytest.raises(DuplicateVote):
            box.vote('addr1', 1)
        with pytest.raises(InvalidCandidate):
            box.vote('addr2', 9)
    finally:
        box_logger.removeHandler(handler)
        box_logger.setLevel(old_level)
    assert handler.locked_during == [False, False, False]
