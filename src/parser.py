""" Split command lines into argument vectors. """
import logging

from constants import VAR_NAME_RX
from lexer import Lexer, TokenizeResult


def is_assignment_token(tok: str) -> bool:
    """ Return True if tok looks like NAME=value with a valid NAME. """
    if "=" not in tok or tok.startswith("="):
        return False
    name, _ = tok.split("=", 1)
    return bool(VAR_NAME_RX.fullmatch(name))


def split_assignments(words: list[str]) -> tuple[list[str], list[str]]:
    """ Separate leading NAME=value words from the command and its args. """
    idx = 0
    while idx < len(words) and is_assignment_token(words[idx]):
        idx += 1
    return words[:idx], words[idx:]


class Parser:
    """
    Configuration for splitting lines.

    expand_env enables $NAME and ${NAME} expansion through resolver (the
    process environment by default). expand_substitution runs `cmd` and
    $(cmd) through executor (a subordinate shell by default), in cwd when
    given. A Parser keeps no per-line state and can be reused.
    """
    def __init__(self, expand_env=False, expand_substitution=False,
                 resolver=None, cwd=None, executor=None, logger=None):
        self.expand_env = expand_env
        self.expand_substitution = expand_substitution
        self.resolver = resolver
        self.cwd = cwd
        self.executor = executor
        self.logger = logger or logging.getLogger("Parser")

    def split(self, line: str) -> TokenizeResult:
        lexer = Lexer(
            line,
            expand_env=self.expand_env,
            expand_substitution=self.expand_substitution,
            resolver=self.resolver,
            executor=self.executor,
            cwd=self.cwd,
        )
        result = lexer.tokenize()
        if result.has_more:
            self.logger.debug(f"Stopped at position {result.position}: {result.remainder!r}")
        return result

    def parse(self, line: str) -> list[str]:
        return self.split(line).words

    def parse_with_env_assignments(self, line: str) -> tuple[list[str], list[str]]:
        return split_assignments(self.parse(line))


def parse_args(line: str, **options) -> list[str]:
    return Parser(**options).parse(line)


def parse_with_env_assignments(line: str, **options) -> tuple[list[str], list[str]]:
    return Parser(**options).parse_with_env_assignments(line)
