import os

from wsh.config import SUBSTITUTION_MARKER


class VariableStore:
    """Shell-local variables, kept in insertion order."""

    def __init__(self):
        self._vars = {}

    def set(self, name, value):
        self._vars[name] = value

    def unset(self, name):
        self._vars.pop(name, None)

    def get(self, name, default=None):
        return self._vars.get(name, default)

    def list(self):
        return list(self._vars.items())

    def __contains__(self, name):
        return name in self._vars

    def __len__(self):
        return len(self._vars)


def resolve_token(token, store, environ=None):
    """
    Thay thế token $NAME bằng giá trị biến.
    Environment variables shadow local ones; unknown names give "".
    The value is never scanned again for markers.
    """
    if not token.startswith(SUBSTITUTION_MARKER):
        return token

    environ = os.environ if environ is None else environ
    name = token[len(SUBSTITUTION_MARKER):]
    if name in environ:
        return environ[name]
    return store.get(name, "")


def substitute(tokens, store, environ=None):
    """
    Resolve every token and drop the ones that became empty.
    Returns: list of tokens
    """
    resolved = (resolve_token(tok, store, environ) for tok in tokens)
    return [tok for tok in resolved if tok != ""]
