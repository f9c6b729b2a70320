""" Variable lookup used for $NAME expansion. """
import os

from constants import VAR_NAME_RX


def getenv(name: str) -> str:
    """ Default resolver: read the process environment, "" when unset. """
    return os.environ.get(name, "")


class ShellState:
    def __init__(self, environ=None):
        self.vars = {}
        # None means "the live process environment"
        self.environ = environ

    def set_var(self, name, value):
        if not VAR_NAME_RX.fullmatch(name):
            raise ValueError(f"not a valid variable name: {name!r}")
        self.vars[name] = value

    def get_var(self, name):
        environ = os.environ if self.environ is None else self.environ
        return self.vars.get(name, environ.get(name, ""))

    def apply_assignments(self, words):
        """ Store each NAME=value word as a local variable. """
        for word in words:
            name, value = word.split("=", 1)
            self.set_var(name, value)
