import os
import uuid

import pytest

from minishell.command import Redirections
from minishell.errors import CommandFailure
from minishell.redirections import (
    heredoc_path,
    is_ambiguous,
    last_input_index,
    last_output_index,
    open_redirections,
    prepare_files,
)


def test_last_indexes():
    redirections = Redirections(
        all_files=["in1", "out1", "doc", "out2", "app"],
        infiles=["in1"],
        outfiles=["out1", "out2"],
        append_files=["app"],
        heredocs=["doc"],
    )
    assert last_input_index(redirections) == 2
    assert last_output_index(redirections) == 4


def test_last_indexes_empty():
    redirections = Redirections()
    assert last_input_index(redirections) is None
    assert last_output_index(redirections) is None


def test_last_input_none_when_only_outputs():
    redirections = Redirections(all_files=["o"], outfiles=["o"])
    assert last_input_index(redirections) is None
    assert last_output_index(redirections) == 0


def test_is_ambiguous():
    redirections = Redirections(all_files=["", "a b", "ok"], ambiguous_indexes=[0, 1])
    assert is_ambiguous("", redirections, 0)
    assert is_ambiguous("a b", redirections, 1)
    assert not is_ambiguous("ok", redirections, 2)
    assert not is_ambiguous("a b", redirections, 2)


def test_heredoc_path():
    assert heredoc_path("EOF") == "/tmp/_EOF"


def test_prepare_files_creates_and_truncates(tmp_path):
    out = tmp_path / "out.txt"
    out.write_text("old content")
    app = tmp_path / "app.txt"
    app.write_text("kept")
    redirections = Redirections(
        all_files=[str(out), str(app)],
        outfiles=[str(out)],
        append_files=[str(app)],
    )
    prepare_files(redirections)
    assert out.read_text() == ""
    assert app.read_text() == "kept"


def test_prepare_files_missing_input(tmp_path):
    missing = str(tmp_path / "missing")
    redirections = Redirections(all_files=[missing], infiles=[missing])
    with pytest.raises(CommandFailure) as info:
        prepare_files(redirections)
    assert info.value.status == 1
    assert info.value.message == f"Minishell: {missing}: No such file or directory"


def test_prepare_files_ambiguous_stops_before_creating(tmp_path):
    later = tmp_path / "later"
    redirections = Redirections(
        all_files=["", str(later)], outfiles=[str(later)], ambiguous_indexes=[0]
    )
    with pytest.raises(CommandFailure) as info:
        prepare_files(redirections)
    assert info.value.message == "Minishell: ambiguous redirect"
    assert not later.exists()


def test_open_redirections_input_and_output(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"hello")
    target = tmp_path / "out.txt"
    redirections = Redirections(
        all_files=[str(source), str(target)],
        infiles=[str(source)],
        outfiles=[str(target)],
    )
    stdin, stdout = open_redirections(redirections)
    try:
        assert stdin.read() == b"hello"
        stdout.write(b"written")
    finally:
        stdin.close()
        stdout.close()
    assert target.read_bytes() == b"written"


def test_open_redirections_append(tmp_path):
    target = tmp_path / "log.txt"
    target.write_bytes(b"one\n")
    redirections = Redirections(all_files=[str(target)], append_files=[str(target)])
    stdin, stdout = open_redirections(redirections)
    assert stdin is None
    stdout.write(b"two\n")
    stdout.close()
    assert target.read_bytes() == b"one\ntwo\n"


def test_open_redirections_heredoc_removed():
    name = f"mshtest_{uuid.uuid4().hex}"
    path = heredoc_path(name)
    with open(path, "wb") as handle:
        handle.write(b"doc body\n")
    redirections = Redirections(all_files=[name], heredocs=[name])
    stdin, stdout = open_redirections(redirections)
    try:
        assert stdout is None
        assert stdin.read() == b"doc body\n"
    finally:
        stdin.close()
    assert not os.path.exists(path)


def test_open_redirections_missing_heredoc():
    name = f"mshtest_{uuid.uuid4().hex}"
    redirections = Redirections(all_files=[name], heredocs=[name])
    with pytest.raises(CommandFailure) as info:
        open_redirections(redirections)
    assert info.value.status == 1
    assert info.value.message.startswith("fails to open infile")


def test_open_redirections_none():
    assert open_redirections(Redirections()) == (None, None)