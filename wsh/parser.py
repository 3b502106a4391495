import enum
import logging
from dataclasses import dataclass, field

from wsh.config import BUILTIN_NAMES, DETACH_MARKER, PIPE_SEPARATOR
from wsh.errors import ValidationError

log = logging.getLogger(__name__)


class CommandKind(enum.Enum):
    EXIT = "exit"
    CD = "cd"
    HISTORY = "history"
    EXPORT = "export"
    LOCAL = "local"
    VARS = "vars"
    EXTERNAL = "external"


@dataclass
class Command:
    tokens: list
    detach: bool = False

    @property
    def program(self):
        return self.tokens[0] if self.tokens else None

    @property
    def args(self):
        return self.tokens[1:]


@dataclass
class Pipeline:
    commands: list = field(default_factory=list)
    detach: bool = False

    def __len__(self):
        return len(self.commands)


def tokenize(line):
    """
    Split a line on whitespace and strip a trailing detach marker.
    Returns: Command
    """
    tokens = line.split()
    detach = False
    if tokens and tokens[-1] == DETACH_MARKER:
        tokens.pop()
        detach = True
    return Command(tokens, detach)


def classify(line):
    """
    Decide which built-in (if any) handles the line.
    Returns: (kind: CommandKind, command: Command)
    """
    command = tokenize(line)
    name = command.program
    if name in BUILTIN_NAMES:
        kind = CommandKind(name)
    else:
        kind = CommandKind.EXTERNAL
    log.debug("classified %r as %s", line, kind.name)
    return kind, command


def parse_pipeline(line):
    """
    Split a line into pipe-connected commands.
    Only the last segment may end with the detach marker.
    Returns: Pipeline
    """
    segments = line.split(PIPE_SEPARATOR)
    pipeline = Pipeline()

    for idx, segment in enumerate(segments):
        command = tokenize(segment)
        if not command.tokens:
            raise ValidationError("syntax error: empty command in pipeline")
        if command.detach and idx < len(segments) - 1:
            raise ValidationError(
                f"syntax error: '{DETACH_MARKER}' is only allowed at the end of the line")
        pipeline.commands.append(command)

    pipeline.detach = pipeline.commands[-1].detach
    return pipeline


def split_assignment(builtin, token):
    """
    Tách token NAME=VALUE (VALUE có thể chứa '=').
    Returns: (name, value)
    """
    name, sep, value = token.partition("=")
    if not sep or not name:
        raise ValidationError(
            f"{builtin}: incorrect usage. Expected format: {builtin} VAR=value")
    return name, value
