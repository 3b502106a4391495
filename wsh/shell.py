import argparse
import logging
import sys

from wsh.builtin import execute_builtin
from wsh.config import LOG_LEVEL, MAX_HISTORY, PROMPT
from wsh.errors import ShellError, StateError, ValidationError
from wsh.executor import execute_pipeline, exit_status
from wsh.history import HistoryRing, init_readline
from wsh.parser import CommandKind, classify, parse_pipeline
from wsh.variables import VariableStore, substitute

log = logging.getLogger(__name__)


class Shell:
    """Interpreter state shared by every line: history and shell variables."""

    def __init__(self, history_size=MAX_HISTORY):
        self.history = HistoryRing(history_size)
        self.variables = VariableStore()
        self.last_status = 0

    def execute_line(self, line):
        """
        Run one raw input line (built-in or pipeline).
        Errors are reported on stderr; only `exit` leaves the shell.
        """
        line = line.rstrip("\n")
        if not line.strip():
            return

        try:
            kind, command = classify(line)
            if kind is CommandKind.EXTERNAL:
                self.last_status = self.run_pipeline(line)
            else:
                args = substitute(command.args, self.variables)
                self.last_status = execute_builtin(self, kind, args)
        except ShellError as e:
            print(f"wsh: {e}", file=sys.stderr)
            self.last_status = 1

    def run_pipeline(self, line):
        """
        Parse, substitute and execute an external pipeline.
        Returns: exit_code
        """
        pipeline = parse_pipeline(line)
        argvs = []
        for command in pipeline.commands:
            argv = substitute(command.tokens, self.variables)
            if not argv:
                raise ValidationError("command is empty after substitution")
            argvs.append(argv)

        try:
            stages = execute_pipeline(argvs, pipeline.detach)
        finally:
            self.history.append(line)

        status = exit_status(stages)
        if status > 0:
            log.debug("pipeline %r exited with %d", line, status)
        return status

    def recall(self, k):
        """
        Chạy lại lệnh thứ k trong history (1 = mới nhất).
        The recalled line is not recorded again.
        """
        try:
            line = self.history.get(k)
        except IndexError:
            raise StateError(f"history: {k}: invalid history command number") from None

        log.debug("recalling %d: %r", k, line)
        with self.history.suppressed():
            self.execute_line(line)
        return self.last_status


def run_interactive(shell):
    """Main shell loop"""
    init_readline()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue
        shell.execute_line(line)


def run_batch(shell, batch):
    for line in batch:
        shell.execute_line(line)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wsh",
        description="A small Unix shell with pipelines, history and shell variables.")
    parser.add_argument("batch_file", nargs="?",
                        help="run the commands of this file instead of prompting")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(name)s: %(levelname)s: %(message)s",
    )

    shell = Shell()
    if args.batch_file is None:
        run_interactive(shell)
        return 0

    try:
        batch = open(args.batch_file, errors="replace")
    except OSError as e:
        print(f"wsh: cannot open batch file: {e}", file=sys.stderr)
        return 1
    with batch:
        run_batch(shell, batch)
    return 0
