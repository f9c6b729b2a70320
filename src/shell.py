""" Command-line front end: split lines and print the resulting words. """
import argparse
import json
import logging
import sys

from exceptions import ShellwordsError
from parser import Parser, is_assignment_token, split_assignments
from shell_state import ShellState


def read_command(prompt="", read=None):
    """ Read a line with support for backslash continuation. """
    read = read or input
    lines = []
    while True:
        line = read(prompt)
        # an odd run of trailing backslashes ends in an unescaped one
        if (len(line) - len(line.rstrip("\\"))) % 2:
            lines.append(line[:-1])
            prompt = "> " if prompt else ""
        else:
            lines.append(line)
            break
    return "".join(lines)


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="pysh-words",
        description="Split shell-like command lines into argument vectors"
    )
    parser.add_argument("lines", nargs="*", metavar="LINE",
                        help="lines to split (default: read from stdin)")
    parser.add_argument("--env", action="store_true",
                        help="expand $NAME and ${NAME} references")
    parser.add_argument("--subst", action="store_true",
                        help="run `cmd` and $(cmd) substitutions")
    parser.add_argument("--cwd", metavar="DIR",
                        help="working directory for substitutions")
    parser.add_argument("--define", action="append", default=[], metavar="NAME=VALUE",
                        help="set a variable for expansion (repeatable)")
    parser.add_argument("--assignments", action="store_true",
                        help="report leading NAME=value words separately")
    parser.add_argument("--json", action="store_true",
                        help="print one JSON object per line")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debug output to stderr")
    return parser


class Shell:
    def __init__(self, parser: Parser, assignments=False, as_json=False, out=None, err=None):
        self.parser = parser
        self.assignments = assignments
        self.as_json = as_json
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def split_line(self, line: str) -> int:
        try:
            result = self.parser.split(line)
        except ShellwordsError as e:
            print(f"pysh-words: {e}", file=self.err)
            return 1

        envs, words = [], result.words
        if self.assignments:
            envs, words = split_assignments(result.words)

        if self.as_json:
            record = {
                "words": words,
                "position": result.position,
                "remainder": result.remainder,
            }
            if self.assignments:
                record["envs"] = envs
            print(json.dumps(record, ensure_ascii=False), file=self.out)
        else:
            for env in envs:
                print(f"env: {env}", file=self.out)
            for word in words:
                print(word, file=self.out)

        if result.has_more:
            print(f"pysh-words: stopped at position {result.position}: {result.remainder}",
                  file=self.err)
        return 0

    def run(self, lines=None, read=None) -> int:
        status = 0
        if lines:
            for line in lines:
                status = self.split_line(line) or status
            return status

        while True:
            try:
                line = read_command(read=read)
            except EOFError:
                return status
            status = self.split_line(line) or status


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    state = ShellState()
    for definition in args.define:
        if not is_assignment_token(definition):
            print(f"pysh-words: --define expects NAME=VALUE, got {definition!r}", file=sys.stderr)
            return 2
    state.apply_assignments(args.define)

    parser = Parser(
        expand_env=args.env,
        expand_substitution=args.subst,
        resolver=state.get_var,
        cwd=args.cwd,
    )
    shell = Shell(parser, assignments=args.assignments, as_json=args.json)
    return shell.run(args.lines)


if __name__ == "__main__":
    raise SystemExit(main())
