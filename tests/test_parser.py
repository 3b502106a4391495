"""Tests for tokenizing, classifying and splitting command lines."""

import pytest

from wsh.errors import ValidationError
from wsh.parser import CommandKind, classify, parse_pipeline, split_assignment, tokenize


class TestTokenize:
    def test_splits_on_any_whitespace(self):
        command = tokenize("  ls   -l\t/tmp \n")
        assert command.tokens == ["ls", "-l", "/tmp"]
        assert command.detach is False

    def test_trailing_detach_marker(self):
        command = tokenize("sleep 5 &")
        assert command.tokens == ["sleep", "5"]
        assert command.detach is True

    def test_marker_must_be_a_whole_token(self):
        command = tokenize("echo a&")
        assert command.tokens == ["echo", "a&"]
        assert command.detach is False

    def test_marker_in_the_middle_is_an_argument(self):
        command = tokenize("echo a & b")
        assert command.tokens == ["echo", "a", "&", "b"]
        assert command.detach is False

    def test_no_substitution_while_tokenizing(self):
        assert tokenize("echo $HOME").tokens == ["echo", "$HOME"]

    def test_program_and_args(self):
        command = tokenize("grep -n foo")
        assert command.program == "grep"
        assert command.args == ["-n", "foo"]


class TestClassify:
    @pytest.mark.parametrize("line,kind", [
        ("exit", CommandKind.EXIT),
        ("cd /tmp", CommandKind.CD),
        ("history set 3", CommandKind.HISTORY),
        ("export A=1", CommandKind.EXPORT),
        ("local A=1", CommandKind.LOCAL),
        ("vars", CommandKind.VARS),
        ("ls -l", CommandKind.EXTERNAL),
        ("exitnow", CommandKind.EXTERNAL),
    ])
    def test_kinds(self, line, kind):
        assert classify(line)[0] is kind

    def test_builtin_line_keeps_pipe_as_argument(self):
        kind, command = classify("cd /tmp | ls")
        assert kind is CommandKind.CD
        assert command.args == ["/tmp", "|", "ls"]


class TestParsePipeline:
    def test_single_command(self):
        pipeline = parse_pipeline("ls -l")
        assert len(pipeline) == 1
        assert pipeline.commands[0].tokens == ["ls", "-l"]
        assert pipeline.detach is False

    def test_stages_in_order(self):
        pipeline = parse_pipeline("cat f | sort -r|head -2")
        assert [c.tokens for c in pipeline.commands] == [
            ["cat", "f"], ["sort", "-r"], ["head", "-2"]]

    def test_detach_applies_to_whole_pipeline(self):
        pipeline = parse_pipeline("yes | head -1 &")
        assert pipeline.detach is True
        assert pipeline.commands[-1].tokens == ["head", "-1"]

    @pytest.mark.parametrize("line", ["ls | | wc", "ls |", "| wc"])
    def test_empty_stage(self, line):
        with pytest.raises(ValidationError):
            parse_pipeline(line)

    def test_detach_before_last_stage(self):
        with pytest.raises(ValidationError):
            parse_pipeline("sleep 1 & | cat")


class TestSplitAssignment:
    def test_name_and_value(self):
        assert split_assignment("local", "A=1") == ("A", "1")

    def test_value_may_contain_equals(self):
        assert split_assignment("export", "A=b=c") == ("A", "b=c")

    def test_empty_value(self):
        assert split_assignment("local", "A=") == ("A", "")

    @pytest.mark.parametrize("token", ["A", "=1", "="])
    def test_malformed(self, token):
        with pytest.raises(ValidationError, match="Expected format"):
            split_assignment("local", token)
