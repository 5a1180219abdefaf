'''Winner resolution over a vector of vote counts.

All functions here work on vote counts given in roster order and resolve
ties by roster position: of the candidates sharing the highest count, the
one with the lowest index wins. A left-to-right scan keeping the first strict
maximum gives exactly this, so with no votes at all the first candidate wins.
'''

from numbers import Number
from typing import List, Sequence


class EvaluationError(Exception):
    '''Votes cannot be evaluated, e.g. because there are no candidates.'''
    pass


def first_maximum(counts: Sequence[Number]) -> int:
    '''Return the index of the first candidate with the highest count.

    Later candidates only take over the lead with a strictly higher count.

    :param counts: Vote counts in roster order.
    :raises EvaluationError: If there are no counts to evaluate.
    '''
    if not counts:
        raise EvaluationError('no candidates to evaluate')
    best_i = 0
    best_count = counts[0]
    for i, count in enumerate(counts):
        if count > best_count:
            best_i = i
            best_count = count
    return best_i


def tied_best(counts: Sequence[Number]) -> List[int]:
    '''Return the indices of all candidates sharing the highest count.

    The first index returned is always the one chosen by
    :func:`first_maximum`.
    '''
    if not counts:
        return []
    best_count = counts[first_maximum(counts)]
    return [i for i, count in enumerate(counts) if count == best_count]


def rank_indices(counts: Sequence[Number]) -> List[int]:
    '''Return candidate indices ordered by descending count.

    Equal counts keep roster order, so the first index is the winner.
    '''
    return sorted(range(len(counts)), key=counts.__getitem__, reverse=True)
