'''Candidate specifications and roster construction.

Candidates are identified by their position in the roster, an ordered
sequence fixed when the ballot box is created. The order of the roster is
significant: it decides ties when the winner is determined, so it is never
re-sorted. Names do not need to be unique; two candidates of the same name
remain distinct options distinguished by their index.
'''

from __future__ import annotations

import numbers
from typing import Any, Iterable, Tuple

from ballotbox.persist import simple_serialization


class CandidateError(Exception):
    '''A candidate selection is invalid in the given context.'''
    pass


class InvalidCandidate(CandidateError):
    '''A candidate index is outside the roster.

    :param index: Candidate index that was found to be invalid.
    :param candidate_count: Number of candidates in the roster.
    '''
    def __init__(self, index: Any, candidate_count: int):
        self.index = index
        self.candidate_count = candidate_count
        message = f'invalid candidate: {index!r}'
        if candidate_count:
            message += f', must be between 0 and {candidate_count - 1}'
        super().__init__(message)


@simple_serialization
class Candidate:
    '''A named option on the ballot.

    :param name: Name of the candidate, in any customary text format.
    :param index: Position of the candidate in the roster.
    :param vote_count: Number of votes received so far.
    '''
    def __init__(self, name: str, index: int, vote_count: int = 0):
        self.name = name
        self.index = index
        self.vote_count = vote_count

    def copy(self) -> Candidate:
        return self.__class__(self.name, self.index, self.vote_count)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return (
            self.name == other.name
            and self.index == other.index
            and self.vote_count == other.vote_count
        )

    # mutable counter, not usable as a key
    __hash__ = None

    def __repr__(self) -> str:
        return f'<Candidate({self.name},{self.index}:{self.vote_count})>'


def is_valid_index(index: Any, candidate_count: int) -> bool:
    '''Return True if index selects a candidate from a roster of given size.

    Booleans are integers to Python but never valid selectors here.
    '''
    return (
        isinstance(index, numbers.Integral)
        and not isinstance(index, bool)
        and 0 <= index < candidate_count
    )


def check_index(index: Any, candidate_count: int) -> int:
    '''Check that index selects a candidate from a roster of given size.

    :returns: The index as a plain int.
    :raises InvalidCandidate: If the index is out of range or not an integer.
    '''
    if not is_valid_index(index, candidate_count):
        raise InvalidCandidate(index, candidate_count)
    return int(index)


def make_roster(names: Iterable[str]) -> Tuple[Candidate, ...]:
    '''Create a roster of candidates with zero votes from a list of names.

    :param names: Candidate names in ballot order.
    '''
    return tuple(Candidate(name, i) for i, name in enumerate(names))
