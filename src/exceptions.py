""" Errors raised while splitting a command line. """


class ShellwordsError(Exception):
    """ Base class for all tokenizer errors. """


class UnterminatedConstruct(ShellwordsError, ValueError):
    """ End of input reached while a construct was still open. """
    construct = "construct"

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"unterminated {self.construct} at position {position}")


class UnterminatedEscape(UnterminatedConstruct):
    construct = "escape"


class UnterminatedQuote(UnterminatedConstruct):
    def __init__(self, quote: str, position: int):
        self.quote = quote
        self.construct = "single-quote" if quote == "'" else "double-quote"
        super().__init__(position)


class UnterminatedSubstitution(UnterminatedConstruct):
    def __init__(self, opener: str, position: int):
        self.opener = opener
        self.construct = "backtick" if opener == "`" else "substitution"
        super().__init__(position)


class SubstitutionFailed(ShellwordsError):
    """ A command substitution exited non-zero or could not be started. """

    def __init__(self, command: str, returncode=None, stdout="", stderr=""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""

        if returncode is None:
            detail = "could not be started"
        else:
            detail = f"exited with status {returncode}"
        message = f"command substitution `{command}` {detail}"
        output = (self.stderr or self.stdout).strip()
        if output:
            message += f": {output}"
        super().__init__(message)
