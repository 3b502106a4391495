import enum
import errno
import logging
import os
import signal
import subprocess
import sys
from dataclasses import dataclass, field

from wsh.config import EXIT_NOT_EXECUTABLE, EXIT_NOT_FOUND
from wsh.errors import ExecImageError, ResourceError

log = logging.getLogger(__name__)

# errno của fork/pipe khi hết tài nguyên
RESOURCE_ERRNOS = {errno.EAGAIN, errno.ENOMEM, errno.EMFILE, errno.ENFILE}


class StageState(enum.Enum):
    UNSTARTED = "unstarted"
    SPAWNED = "spawned"
    EXITED = "exited"
    IMAGE_FAILED = "image-failed"
    DETACHED = "detached"


@dataclass
class Stage:
    argv: list
    state: StageState = StageState.UNSTARTED
    pid: int = None
    returncode: int = None
    process: subprocess.Popen = field(default=None, repr=False)

    @property
    def program(self):
        return self.argv[0]


class PipePair:
    """One os.pipe() whose two ends are closed at most once."""

    def __init__(self):
        try:
            self.read_fd, self.write_fd = os.pipe()
        except OSError as e:
            raise ResourceError(f"pipe: {e.strerror}") from e

    def close_read(self):
        if self.read_fd is not None:
            os.close(self.read_fd)
            self.read_fd = None

    def close_write(self):
        if self.write_fd is not None:
            os.close(self.write_fd)
            self.write_fd = None

    def close(self):
        self.close_read()
        self.close_write()

    @property
    def closed(self):
        return self.read_fd is None and self.write_fd is None


class PipeArena:
    """
    The pipes between the stages of one pipeline.

    Pipe i connects stage i (writer) to stage i+1 (reader). Every
    descriptor still held by the parent is closed on exit, whatever
    the way out of the with-block.
    """

    def __init__(self, count):
        self.count = count
        self.pairs = []

    def __enter__(self):
        try:
            for _ in range(self.count):
                self.pairs.append(PipePair())
        except ResourceError:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def stdin_for(self, idx):
        return self.pairs[idx - 1].read_fd if idx > 0 else None

    def stdout_for(self, idx):
        return self.pairs[idx].write_fd if idx < self.count else None

    def release(self, idx):
        """Close the parent's copies of the ends handed to stage idx."""
        if idx > 0:
            self.pairs[idx - 1].close_read()
        if idx < self.count:
            self.pairs[idx].close_write()

    def close(self):
        for pair in self.pairs:
            pair.close()


def spawn_stage(stage, stdin=None, stdout=None, detach=False):
    """
    Start one stage with the given descriptors as stdin/stdout.
    Raises ExecImageError if the program cannot be started and
    ResourceError if no process could be created.
    """
    try:
        # preexec_fn=os.setpgrp tách process group cho pipeline chạy nền
        stage.process = subprocess.Popen(
            stage.argv,
            stdin=stdin,
            stdout=stdout,
            close_fds=True,
            preexec_fn=os.setpgrp if detach else None,
        )
    except FileNotFoundError:
        raise ExecImageError(stage.program, "command not found", EXIT_NOT_FOUND)
    except PermissionError:
        raise ExecImageError(stage.program, "permission denied", EXIT_NOT_EXECUTABLE)
    except OSError as e:
        if e.errno in RESOURCE_ERRNOS:
            raise ResourceError(f"failed to execute '{stage.program}': {e.strerror}") from e
        raise ExecImageError(stage.program, e.strerror or str(e), EXIT_NOT_EXECUTABLE)
    except ValueError as e:
        # argv chứa NUL byte
        raise ExecImageError(stage.program, str(e), EXIT_NOT_EXECUTABLE)

    stage.pid = stage.process.pid
    stage.state = StageState.SPAWNED
    log.debug("spawned %r as pid %d (stdin=%s, stdout=%s)", stage.argv, stage.pid, stdin, stdout)
    return stage


def wait_stages(stages):
    """Wait for every spawned stage, in pipeline order."""
    for stage in stages:
        if stage.state is not StageState.SPAWNED:
            continue
        stage.returncode = stage.process.wait()
        stage.state = StageState.EXITED
        log.debug("pid %d (%s) exited with %d", stage.pid, stage.program, stage.returncode)

        # SIGPIPE after the reader exited is not reported
        if stage.returncode < 0 and stage.returncode != -signal.SIGPIPE:
            try:
                name = signal.Signals(-stage.returncode).name
            except ValueError:
                name = str(-stage.returncode)
            print(f"wsh: {stage.program}: terminated by signal {name}", file=sys.stderr)


def execute_pipeline(argvs, detach=False):
    """
    Execute pipeline of commands, stage i stdout -> stage i+1 stdin.
    Returns: list of Stage
    """
    stages = [Stage(list(argv)) for argv in argvs]
    failure = None
    sys.stdout.flush()

    with PipeArena(len(stages) - 1) as pipes:
        for idx, stage in enumerate(stages):
            try:
                spawn_stage(stage, pipes.stdin_for(idx), pipes.stdout_for(idx), detach)
            except ExecImageError as e:
                # Chỉ stage này lỗi, các stage khác vẫn chạy
                print(f"wsh: {e}", file=sys.stderr)
                stage.state = StageState.IMAGE_FAILED
                stage.returncode = e.status
            except ResourceError as e:
                failure = e
                break
            finally:
                pipes.release(idx)

    if failure is not None:
        log.debug("pipeline aborted: %s", failure)
        if not detach:
            wait_stages(stages)
        raise failure

    if detach:
        spawned = [s for s in stages if s.state is StageState.SPAWNED]
        for stage in spawned:
            stage.state = StageState.DETACHED
        if spawned:
            print(f"[PID {spawned[-1].pid} running in background]", flush=True)
        return stages

    wait_stages(stages)
    return stages


def exit_status(stages):
    """Exit status of a pipeline: the last stage's, 0 while it still runs."""
    if not stages or stages[-1].returncode is None:
        return 0
    return stages[-1].returncode
