"""Ballotbox - a minimal single-vote ballot tallying library.

A :class:`BallotBox` holds a fixed roster of candidates registered when it is
created. Each distinct voter may cast exactly one vote for exactly one
candidate, and the ballot box can report the winner at any time:

-   The candidates and their vote counts are described in the ``candidate``
    module.
-   Voter identities, the record of who has voted and the duplicate vote
    error live in the ``vote`` module.
-   The ``evaluate`` module determines the winner of a vote count vector;
    ties are broken in favour of the candidate listed first.
-   The ``box`` module ties it together in the :class:`BallotBox` object,
    which is safe to use from multiple threads.

Who the voters are and how they are authenticated is up to the host
application; the ballot box only needs an opaque hashable token per voter.
"""

from ballotbox.box import BallotBox, InvalidConfiguration
from ballotbox.candidate import Candidate, CandidateError, InvalidCandidate
from ballotbox.vote import DuplicateVote, VoteError, VoterRecord

__all__ = [
    'BallotBox',
    'Candidate',
    'CandidateError',
    'DuplicateVote',
    'InvalidCandidate',
    'InvalidConfiguration',
    'VoteError',
    'VoterRecord',
]
