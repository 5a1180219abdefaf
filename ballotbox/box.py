'''The ballot box: candidate roster, voter record and vote counters.

A :class:`BallotBox` is created once per election with the list of candidate
names and then accepts votes until it is discarded. Every voter may vote
exactly once, for exactly one candidate; the winner can be queried at any
time.

The voter record and the vote counters are guarded by a single lock so that
the duplicate-vote check and the count increment happen as one step. Two
simultaneous votes by the same voter therefore result in one accepted vote
and one :class:`DuplicateVote`, and no increment is ever lost.
'''

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Sequence, Tuple

import ballotbox.evaluate
from ballotbox.candidate import Candidate, InvalidCandidate, check_index, \
    make_roster
from ballotbox.persist import simple_serialization
from ballotbox.vote import DuplicateVote, VoterIdentity, VoterRecord


logger = logging.getLogger(__name__)


class InvalidConfiguration(ValueError):
    '''A ballot box cannot be created with the given candidates.

    :param names: The candidate names that were rejected.
    :param reason: What is wrong with them.
    '''
    def __init__(self,
                 names: Any,
                 reason: str = 'at least one candidate is required',
                 ):
        self.names = names
        self.reason = reason
        super().__init__(f'invalid ballot configuration: {reason}')


@simple_serialization
class BallotBox:
    '''Tally single votes for a fixed roster of candidates.

    :param names: Names of the candidates in ballot order. The order decides
        ties (the earlier candidate wins). Names may repeat; equally named
        candidates are still distinct options.
    :raises InvalidConfiguration: If there are no candidates or a name is not
        a string.
    '''
    serialize_params = ['names']

    def __init__(self, names: Sequence[str]):
        if isinstance(names, str):
            raise InvalidConfiguration(
                names, 'candidate names must be given as a sequence'
            )
        try:
            names = tuple(names)
        except TypeError as e:
            raise InvalidConfiguration(
                names, 'candidate names must be given as a sequence'
            ) from e
        if not names:
            raise InvalidConfiguration(names)
        for name in names:
            if not isinstance(name, str):
                raise InvalidConfiguration(
                    names, f'candidate name must be a string, got {name!r}'
                )
        self._names = names
        self._candidates = make_roster(names)
        self._voters = VoterRecord()
        self._lock = threading.Lock()

    @property
    def names(self) -> Tuple[str, ...]:
        '''Candidate names in ballot order.'''
        return self._names

    @property
    def candidate_count(self) -> int:
        return len(self._candidates)

    @property
    def candidates(self) -> Tuple[Candidate, ...]:
        '''A snapshot of the candidates with their current vote counts.'''
        with self._lock:
            return tuple(cand.copy() for cand in self._candidates)

    @property
    def total_votes(self) -> int:
        return sum(self.vote_counts())

    @property
    def voter_count(self) -> int:
        '''Number of voters that have cast their vote.'''
        with self._lock:
            return len(self._voters)

    def vote(self, voter: VoterIdentity, candidate_index: int) -> None:
        '''Cast a vote of the given voter for the candidate at the index.

        The candidate index is checked before the voter; if both are invalid,
        :class:`InvalidCandidate` is raised. On any error, nothing changes.

        :param voter: Identity of the voter; any hashable token.
        :param candidate_index: Position of the chosen candidate in the
            roster.
        :raises InvalidCandidate: If the index does not select a candidate.
        :raises DuplicateVote: If the voter has already voted.
        '''
        try:
            index = check_index(candidate_index, len(self._candidates))
        except InvalidCandidate:
            logger.debug('rejecting vote by %r for invalid candidate %r',
                         voter, candidate_index)
            raise
        try:
            with self._lock:
                self._voters.mark(voter)
                self._candidates[index].vote_count += 1
        except DuplicateVote:
            logger.debug('rejecting repeated vote by %r', voter)
            raise
        logger.debug('%r voted for candidate %d', voter, index)

    def has_voted(self, voter: VoterIdentity) -> bool:
        '''Return True if the voter has already cast a vote.'''
        with self._lock:
            return self._voters.has_voted(voter)

    def vote_counts(self) -> List[int]:
        '''Return the numbers of votes in roster order.'''
        with self._lock:
            return [cand.vote_count for cand in self._candidates]

    def get_candidate(self, index: int) -> Candidate:
        '''Return a snapshot of the candidate at the given index.

        :raises InvalidCandidate: If the index does not select a candidate.
        '''
        index = check_index(index, len(self._candidates))
        with self._lock:
            return self._candidates[index].copy()

    def get_winner_index(self) -> int:
        '''Return the index of the candidate with the most votes.

        Ties go to the candidate listed first; with no votes cast, the first
        candidate is the winner.
        '''
        return ballotbox.evaluate.first_maximum(self.vote_counts())

    def get_winner(self) -> str:
        '''Return the name of the candidate with the most votes.

        See :meth:`get_winner_index` for the tie rule.
        '''
        return self.names[self.get_winner_index()]

    def leaders(self) -> List[Candidate]:
        '''Return all candidates sharing the highest vote count.

        More than one leader means the winner was decided by roster order.
        '''
        snapshot = self.candidates
        counts = [cand.vote_count for cand in snapshot]
        return [snapshot[i] for i in ballotbox.evaluate.tied_best(counts)]

    def ranking(self) -> List[Candidate]:
        '''Return the candidates ordered by descending vote count.'''
        snapshot = self.candidates
        counts = [cand.vote_count for cand in snapshot]
        return [snapshot[i] for i in ballotbox.evaluate.rank_indices(counts)]

    def results(self) -> List[Tuple[str, int]]:
        '''Return (name, vote count) pairs in roster order.'''
        return list(zip(self.names, self.vote_counts()))

    def summary(self) -> Dict[str, Any]:
        '''Return a JSON-ready snapshot of the current results.'''
        snapshot = self.candidates
        counts = [cand.vote_count for cand in snapshot]
        winner = snapshot[ballotbox.evaluate.first_maximum(counts)]
        return {
            'candidates': [
                {'name': cand.name, 'index': cand.index,
                 'votes': cand.vote_count}
                for cand in snapshot
            ],
            'total_votes': sum(counts),
            'winner': winner.name,
        }

    # names of the contract interface this tally mirrors
    hasVoted = has_voted
    getWinner = get_winner

    def __repr__(self) -> str:
        return f'<BallotBox({", ".join(self.names)})>'
