'''Vote errors and the record of voters who have already voted.

A voter is identified by an opaque token handed in by the host environment
(an address, a session ID, a user name...). The only requirement is that the
token is hashable and compares equal for the same voter; how the token is
authenticated is not the concern of this module.
'''

from typing import Any, Dict, Hashable, Iterator


VoterIdentity = Hashable


class VoteError(Exception):
    '''A vote is invalid given the election rules.'''
    pass


class DuplicateVote(VoteError):
    '''A voter tried to vote a second time.

    The message is fixed as existing callers match on its exact text.

    :param voter: Identity of the voter that has already voted.
    '''
    MESSAGE = 'You have already voted!'

    def __init__(self, voter: VoterIdentity):
        self.voter = voter
        super().__init__(self.MESSAGE)


class VoterRecord:
    '''An append-only record of voters who have cast their vote.

    Voters never seen before read as not having voted. Once marked, a voter
    stays marked for the lifetime of the record; there is no way to unmark.

    Not synchronized on its own; the owning ballot box serializes access.
    '''
    def __init__(self):
        self._voted: Dict[VoterIdentity, bool] = {}

    def has_voted(self, voter: VoterIdentity) -> bool:
        return self._voted.get(voter, False)

    def check(self, voter: VoterIdentity) -> None:
        '''Check that the voter may still vote.

        :raises DuplicateVote: If the voter has already voted.
        '''
        if self.has_voted(voter):
            raise DuplicateVote(voter)

    def mark(self, voter: VoterIdentity) -> None:
        '''Record that the voter has voted.

        :raises DuplicateVote: If the voter has already voted.
        '''
        self.check(voter)
        self._voted[voter] = True

    def __contains__(self, voter: Any) -> bool:
        return self.has_voted(voter)

    def __iter__(self) -> Iterator[VoterIdentity]:
        return iter(self._voted)

    def __len__(self) -> int:
        return len(self._voted)

    def __repr__(self) -> str:
        return f'<VoterRecord({len(self)} voted)>'
