import pytest

from wsh.shell import Shell

TEST_VARS = ("WSH_TEST_FOO", "WSH_TEST_BAR", "WSH_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep exported variables and `cd` from leaking between tests."""
    for name in TEST_VARS:
        # setenv first so the original (unset) state is restored afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def shell():
    return Shell(history_size=5)


@pytest.fixture
def run(shell, capfd):
    """Run lines through the shell and return (stdout, stderr) of the last batch."""
    def _run(*lines):
        capfd.readouterr()
        for line in lines:
            shell.execute_line(line)
        return capfd.readouterr()
    return _run
