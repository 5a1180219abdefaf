"""A commandline tool for quick tallying of a vote log.

Replays a log of votes into a ballot box for the given candidates and shows
the results. Each line of the log holds one vote as ``voter,candidate_index``;
blank lines and lines starting with ``#`` are skipped.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import Iterable, List, Optional, Tuple

from ballotbox.box import BallotBox
from ballotbox.candidate import CandidateError
from ballotbox.vote import VoteError

logger = logging.getLogger(__name__)

argparser = argparse.ArgumentParser(
    prog='ballotbox',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-c', '--candidates',
    nargs='+',
    required=True,
    help='candidate names in ballot order (ties go to the earlier one)',
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the vote log from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the vote log from standard input',
)
argparser.add_argument(
    '-s', '--strict',
    action='store_true',
    help='abort on the first rejected vote instead of skipping it',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all log messages, including every accepted vote',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any log messages',
)


class VoteLogError(ValueError):
    '''A line of the vote log cannot be parsed.

    :param line_no: Number of the offending line (starting at 1).
    :param line: Contents of the line.
    '''
    def __init__(self, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(
            f'malformed vote on line {line_no}: {line!r},'
            ' expected voter,candidate_index'
        )


def parse_vote(line_no: int, line: str) -> Optional[Tuple[str, int]]:
    '''Parse a single vote log line into a (voter, candidate index) pair.

    :returns: None for blank and comment lines.
    :raises VoteLogError: If the line is malformed.
    '''
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    voter, sep, index_str = line.rpartition(',')
    voter = voter.strip()
    if not sep or not voter:
        raise VoteLogError(line_no, line)
    try:
        index = int(index_str.strip())
    except ValueError as e:
        raise VoteLogError(line_no, line) from e
    return voter, index


def replay(box: BallotBox,
           lines: Iterable[str],
           strict: bool = False,
           ) -> int:
    '''Cast all votes from the log into the ballot box.

    :param box: Ballot box to vote into.
    :param lines: Lines of the vote log.
    :param strict: Raise on the first rejected vote instead of skipping it.
    :returns: Number of rejected lines.
    '''
    n_rejected = 0
    for line_no, line in enumerate(lines, start=1):
        try:
            parsed = parse_vote(line_no, line)
            if parsed is None:
                continue
            voter, index = parsed
            box.vote(voter, index)
        except (VoteLogError, VoteError, CandidateError) as e:
            if strict:
                raise
            logger.warning('line %d rejected: %s', line_no, e)
            n_rejected += 1
    return n_rejected


def show_results(box: BallotBox) -> None:
    """Show the vote counts of all candidates and the winner."""
    results = box.results()
    n_just_chars = len(max((name for name, _ in results), key=len))
    for name, n_votes in results:
        print(name.ljust(n_just_chars), ' ', n_votes)
    print()
    leaders = box.leaders()
    if len(leaders) > 1:
        tied = ', '.join(cand.name for cand in leaders)
        print(f'Tie between {tied}, resolved by ballot order')
    print(f'Winner: {box.get_winner()}')


def main(candidates: List[str],
         input_file: Optional[io.TextIOBase] = None,
         use_stdin: bool = False,
         strict: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    box = BallotBox(candidates)
    n_rejected = replay(box, input_file, strict=strict)
    if n_rejected:
        logger.info('%d votes rejected', n_rejected)
    if not box.total_votes:
        warnings.warn('no valid votes in the log')
    print(f'Received {box.total_votes} votes'
          f' for {box.candidate_count} candidates')
    print()
    show_results(box)


def run(argv: Optional[List[str]] = None) -> None:
    args = argparser.parse_args(argv)
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))


if __name__ == '__main__':
    run()
