""" Lexical analysis for shell command lines. """
from constants import (
    ENV_REF_RX,
    FD_NUMBER_RX,
    FIELD_SEPARATOR_RX,
    OPERATOR_CHARS,
    REDIRECT_CHARS,
    SPACE_CHARS,
)
from exceptions import (
    UnterminatedEscape,
    UnterminatedQuote,
    UnterminatedSubstitution,
)
from runner import run_substitution
from shell_state import getenv

# Word fragment kinds
LITERAL = "literal"
EXPANSION = "expansion"                # unquoted $NAME, field-split when resolved
QUOTED_EXPANSION = "quoted_expansion"  # "$NAME", kept as one field


class TokenizeResult:
    """
    Words split from a line, plus where tokenizing stopped.

    position is the index of the first character that was not consumed, or 0
    when the whole line was consumed. remainder is the unconsumed text and is
    empty exactly when nothing is left over.
    """
    def __init__(self, words, position=0, remainder=""):
        self.words = words
        self.position = position
        self.remainder = remainder

    @property
    def has_more(self) -> bool:
        return bool(self.remainder)

    def __iter__(self):
        return iter((self.words, self.position))

    def __repr__(self):
        return (f"TokenizeResult(words={self.words!r}, position={self.position!r}, "
                f"remainder={self.remainder!r})")


class Lexer:
    """
    Scan one line into words.

    A Lexer holds the scan state for a single call and is discarded
    afterwards; build a new one for every line.
    """
    def __init__(self, line, expand_env=False, expand_substitution=False,
                 resolver=None, executor=None, cwd=None):
        self.line = line
        self.expand_env = expand_env
        self.expand_substitution = expand_substitution
        self.resolver = resolver or getenv
        self.executor = executor or run_substitution
        self.cwd = cwd

        self.pos = 0
        self.escaped = False
        self.single_quoted = False
        self.double_quoted = False

        # open `...` or $(...) capture
        self.capture = None
        self.capture_start = 0
        self.capture_buf = []
        self.capture_depth = 0
        self.capture_quote = None
        self.capture_escaped = False

        self.fragments = []
        self.word_started = False
        self.word_start = 0
        # True while the word holds only unquoted, unescaped characters
        self.word_plain = True
        self.quote_start = 0

        self.words = []
        self.stop = None

    def tokenize(self) -> TokenizeResult:
        line = self.line
        n = len(line)

        while self.pos < n:
            ch = line[self.pos]

            if self.capture is not None:
                self._capture_char(ch)
            elif self.escaped:
                self._append(LITERAL, ch)
                self.escaped = False
            elif ch == "\\" and not self.single_quoted:
                self._begin_word(plain=False)
                self.escaped = True
            elif self.single_quoted:
                if ch == "'":
                    self.single_quoted = False
                else:
                    self._append(LITERAL, ch)
            elif self.double_quoted:
                if ch == '"':
                    self.double_quoted = False
                elif not (ch == "$" and self._scan_reference(quoted=True)):
                    self._append(LITERAL, ch)
            elif ch in SPACE_CHARS:
                self._finish_word()
            elif ch == '"' or ch == "'":
                self._begin_word(plain=False)
                # an empty pair still yields a word
                self._append(LITERAL, "")
                self.quote_start = self.pos
                if ch == '"':
                    self.double_quoted = True
                else:
                    self.single_quoted = True
            elif ch == "`":
                self._open_capture("`")
            elif ch == "$" and line.startswith("$(", self.pos):
                self._open_capture("$(")
                self.pos += 1
            elif ch == "$" and self._scan_reference(quoted=False):
                pass
            elif ch in OPERATOR_CHARS:
                self._stop_at(ch)
                break
            else:
                self._append(LITERAL, ch, plain=True)

            self.pos += 1

        if self.stop is None:
            self._check_terminated()
            self._finish_word()
            return TokenizeResult(self.words)

        return TokenizeResult(self.words, self.stop, line[self.stop:])

    def _begin_word(self, plain):
        if not self.word_started:
            self.word_started = True
            self.word_start = self.pos
        if not plain:
            self.word_plain = False

    def _append(self, kind, text, plain=False):
        self._begin_word(plain)
        self.fragments.append((kind, text))

    def _scan_reference(self, quoted) -> bool:
        """ Record a $NAME or ${NAME} reference starting at self.pos. """
        if not self.expand_env:
            return False

        line = self.line
        start = self.pos + 1
        if line.startswith("{", start):
            end = line.find("}", start + 1)
            if end == -1:
                return False
            name = line[start + 1:end]
            if not ENV_REF_RX.fullmatch(name):
                return False
            next_pos = end + 1
        else:
            m = ENV_REF_RX.match(line, start)
            if not m:
                return False
            name = m.group()
            next_pos = m.end()

        self._append(QUOTED_EXPANSION if quoted else EXPANSION, name)
        self.pos = next_pos - 1
        return True

    def _open_capture(self, opener):
        self.capture = opener
        self.capture_start = self.pos
        self.capture_buf = []
        self.capture_depth = 0
        self.capture_quote = None
        self.capture_escaped = False

    def _capture_char(self, ch):
        buf = self.capture_buf

        if self.capture_escaped:
            self.capture_escaped = False
        elif ch == "\\" and self.capture_quote != "'":
            self.capture_escaped = True
        elif self.capture_quote is not None:
            if ch == self.capture_quote:
                self.capture_quote = None
        elif ch == '"' or ch == "'":
            self.capture_quote = ch
        elif self.capture == "`":
            if ch == "`":
                self._close_capture()
                return
        elif ch == "(":
            self.capture_depth += 1
        elif ch == ")":
            if self.capture_depth == 0:
                self._close_capture()
                return
            self.capture_depth -= 1

        buf.append(ch)

    def _close_capture(self):
        body = "".join(self.capture_buf)
        opener = self.capture
        self.capture = None
        self.capture_buf = []

        if self.expand_substitution:
            output = self.executor(body, cwd=self.cwd)
            if output:
                self._append(LITERAL, output)
            elif self.word_started:
                # empty output joins its neighbours but never makes a word
                self.word_plain = False
        else:
            closer = "`" if opener == "`" else ")"
            self._append(LITERAL, opener + body + closer)

    def _stop_at(self, ch):
        fragments = self.fragments
        if (ch in REDIRECT_CHARS and self.word_started and self.word_plain
                and FD_NUMBER_RX.fullmatch("".join(text for _, text in fragments))):
            # 2>file: the digits belong to the redirection
            self.stop = self.word_start
            self._reset_word()
            return

        self._finish_word()
        self.stop = self.pos

    def _check_terminated(self):
        if self.escaped:
            raise UnterminatedEscape(len(self.line) - 1)
        if self.single_quoted:
            raise UnterminatedQuote("'", self.quote_start)
        if self.double_quoted:
            raise UnterminatedQuote('"', self.quote_start)
        if self.capture is not None:
            raise UnterminatedSubstitution(self.capture, self.capture_start)

    def _finish_word(self):
        if not self.word_started:
            return

        current = []
        pending = False
        for kind, text in self.fragments:
            if kind == EXPANSION:
                value = self.resolver(text) or ""
                for index, piece in enumerate(FIELD_SEPARATOR_RX.split(value)):
                    if index and pending:
                        self.words.append("".join(current))
                        current = []
                        pending = False
                    if piece:
                        current.append(piece)
                        pending = True
            else:
                if kind == QUOTED_EXPANSION:
                    text = self.resolver(text) or ""
                current.append(text)
                pending = True

        if pending:
            self.words.append("".join(current))
        self._reset_word()

    def _reset_word(self):
        self.fragments = []
        self.word_started = False
        self.word_plain = True


def tokenize(line: str, **options) -> TokenizeResult:
    """ Split line into words; see Lexer for the accepted options. """
    return Lexer(line, **options).tokenize()
