""" Run command substitutions in a subordinate shell. """
import logging
import os
import subprocess

from exceptions import SubstitutionFailed

logger = logging.getLogger(__name__)


def shell_command(command: str, platform: str = os.name) -> list[str]:
    """ Build the interpreter argv that runs command verbatim. """
    if platform == "nt":
        shell = os.environ.get("COMSPEC") or "cmd.exe"
        return [shell, "/c", command]

    shell = os.environ.get("SHELL") or "/bin/sh"
    return [shell, "-c", command]


def strip_trailing_newline(output: str) -> str:
    """ Drop at most one trailing newline, like $(...) in a shell. """
    if output.endswith("\r\n"):
        return output[:-2]
    if output.endswith("\n"):
        return output[:-1]
    return output


def run_substitution(command: str, cwd=None) -> str:
    argv = shell_command(command)
    logger.debug(f"Running substitution: {argv} (cwd={cwd})")

    try:
        completed = subprocess.run(
            argv,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
        )
    except OSError as err:
        logger.debug(f"Could not start {argv[0]}: {err}")
        raise SubstitutionFailed(command, stderr=str(err)) from err

    if completed.returncode != 0:
        logger.debug(f"Substitution exited with status {completed.returncode}")
        raise SubstitutionFailed(command, completed.returncode,
                                 completed.stdout, completed.stderr)

    return strip_trailing_newline(completed.stdout)
