import os
import sys

from wsh.errors import ValidationError
from wsh.parser import CommandKind, split_assignment


def builtin_exit(shell, args):
    """Exit shell"""
    if args:
        raise ValidationError("exit: does not take any arguments")
    sys.exit(0)


def builtin_cd(shell, args):
    """Change directory"""
    if len(args) != 1:
        raise ValidationError("cd: wrong number of arguments. Usage: cd <directory>")
    try:
        os.chdir(os.path.expanduser(args[0]))
        return 0
    except OSError as e:
        print(f"cd: {e.strerror}: {args[0]}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"cd: {e}", file=sys.stderr)
        return 1


def _is_number(token):
    # int() only takes ASCII digits here, isdigit() alone also accepts "²"
    return token.isascii() and token.isdigit()


def builtin_history(shell, args):
    """
    history            -> list entries, newest first
    history set <n>    -> resize the ring
    history <k>        -> run entry k again
    """
    if not args:
        for pos, line in shell.history.list():
            print(f"{pos}) {line}")
        return 0

    if args[0] == "set":
        if len(args) != 2 or not _is_number(args[1]):
            raise ValidationError("history set: incorrect usage. Usage: history set <size>")
        shell.history.resize(int(args[1]))
        return 0

    if len(args) == 1 and _is_number(args[0]) and int(args[0]) > 0:
        return shell.recall(int(args[0]))

    raise ValidationError("history: incorrect usage. Usage: history [set <size> | <number>]")


def _assignment(name, args):
    if len(args) != 1:
        raise ValidationError(f"{name}: incorrect usage. Expected format: {name} VAR=value")
    return split_assignment(name, args[0])


def builtin_export(shell, args):
    """Set or unset an environment variable"""
    name, value = _assignment("export", args)
    try:
        if value:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)
    except ValueError as e:
        raise ValidationError(f"export: {e}") from None
    return 0


def builtin_local(shell, args):
    """Set or unset a shell variable"""
    name, value = _assignment("local", args)
    if value:
        shell.variables.set(name, value)
    else:
        shell.variables.unset(name)
    return 0


def builtin_vars(shell, args):
    """List shell variables"""
    if args:
        raise ValidationError("vars: does not take any arguments")
    for name, value in shell.variables.list():
        print(f"{name}={value}")
    return 0


BUILTINS = {
    CommandKind.EXIT: builtin_exit,
    CommandKind.CD: builtin_cd,
    CommandKind.HISTORY: builtin_history,
    CommandKind.EXPORT: builtin_export,
    CommandKind.LOCAL: builtin_local,
    CommandKind.VARS: builtin_vars,
}


def execute_builtin(shell, kind, args):
    """
    Execute built-in command.
    Returns: exit_code
    """
    return BUILTINS[kind](shell, args)
