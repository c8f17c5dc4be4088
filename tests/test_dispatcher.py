from pathlib import Path

import pytest

from mysh.core.commands import parse_line


def _run(core, line: str):
    core.history.append(line)
    command = parse_line(line)
    assert command is not None
    return core.dispatcher.dispatch(command)


def test_unknown_verb_reports_and_does_nothing(core) -> None:
    result = _run(core, "frobnicate now")

    assert not result.exit_requested
    assert core.output.errors == ["mysh: frobnicate: command not found"]
    assert core.backend.spawned == []


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("start", "mysh: Missing argument [program]"),
        ("background", "mysh: Missing argument [program]"),
        ("repeat 3", "mysh: Usage: repeat [repetitions] [command]"),
        ("repeat x ./prog", "mysh: Argument [repetitions] must be a number"),
        ("replay", "mysh: Missing argument [index]"),
        ("replay one", "mysh: Argument must be a number"),
        ("terminate", "mysh: Missing argument [pid]"),
        ("terminate -3", "mysh: Argument must be a number"),
        ("movetodir", "mysh: Missing argument [directory]"),
        ("dwelt", "mysh: Missing argument [file | directory]"),
        ("maik", "mysh: Missing argument [filename]"),
        ("coppy a", "mysh: Usage: coppy [source] [destination]"),
        ("coppyabode a", "mysh: Usage: coppyabode [source-dir] [target-dir]"),
        ("history --all", "mysh: Usage: history [-c]"),
    ],
)
def test_usage_errors_have_no_side_effects(core, program: str, line: str, message: str) -> None:
    _run(core, line)

    assert core.output.errors == [message]
    assert core.backend.spawned == []
    assert core.backend.signalled == []


def test_start_passes_remaining_tokens_as_argv(core, program: str) -> None:
    _run(core, f"start {program} -n 3")

    assert core.backend.spawned == [[program, "-n", "3"]]
    assert core.backend.waited == [1000]
    assert not core.registry


def test_background_then_terminate(core, program: str) -> None:
    _run(core, f"background {program}")
    assert core.registry.pids() == [1000]

    _run(core, "terminate 1000")

    assert core.backend.signalled == [1000]
    assert not core.registry


def test_repeat_then_terminateall(core, program: str) -> None:
    _run(core, f"repeat 3 {program} 5")
    assert len(core.registry) == 3

    core.backend.dead.add(1001)
    _run(core, "terminateall")

    assert not core.registry
    assert core.output.infos[-1] == "mysh: Terminated 3 processes"


def test_history_lists_newest_first_including_itself(core) -> None:
    _run(core, "dwelt nothing")
    _run(core, "history")

    assert core.output.infos[-2:] == ["0: history", "1: dwelt nothing"]


def test_history_clear(core) -> None:
    _run(core, "dwelt nothing")
    _run(core, "history -c")

    assert len(core.history) == 0
    assert core.output.infos[-1] == "mysh: History cleared"


def test_replay_zero_runs_previous_command(core, workspace: Path) -> None:
    _run(core, "maik foo.txt")
    assert (workspace / "foo.txt").read_text(encoding="utf-8") == "Draft\n"

    _run(core, "replay 0")

    assert core.output.errors == ["mysh: foo.txt already exists."]
    assert core.history.entries == ("maik foo.txt", "replay 0")


def test_replay_of_replay_is_refused(core, program: str) -> None:
    _run(core, f"background {program}")
    _run(core, "replay 0")
    _run(core, "replay 0")

    assert core.output.errors[-1] == "mysh: Cannot replay a replay command"
    assert len(core.backend.spawned) == 2


def test_replay_index_out_of_range(core) -> None:
    _run(core, "dwelt a")
    _run(core, "replay 1")

    assert core.output.errors == ["mysh: Index out of range"]


def test_replay_of_blank_loaded_entry(core) -> None:
    core.history.append("")
    _run(core, "replay 0")

    assert core.output.errors == ["mysh: Cannot replay an empty command"]


def test_replay_of_exit_ends_session(core) -> None:
    _run(core, "byebye")
    result = _run(core, "replay 0")

    assert result.exit_requested
    assert result.exit_status == 0


def test_exit_flushes_history(core, workspace: Path) -> None:
    _run(core, "dwelt a")
    result = _run(core, "byebye")

    assert result.exit_status == 0
    assert (workspace / "mysh.history").read_text(encoding="utf-8") == "dwelt a\n"
    assert core.output.infos[-1] == f"mysh: History saved to {workspace / 'mysh.history'}"


def test_exit_status_reflects_flush_failure(core, workspace: Path) -> None:
    (workspace / "mysh.history").mkdir()
    result = _run(core, "byebye")

    assert result.exit_status == 1
    assert core.output.errors[-1].startswith("mysh: Couldn't save history file: ")


def test_dwelt_reports_kind(core, workspace: Path) -> None:
    (workspace / "file.txt").write_text("x", encoding="utf-8")
    (workspace / "dir").mkdir()

    _run(core, "dwelt file.txt")
    _run(core, "dwelt dir")
    _run(core, "dwelt missing")

    assert core.output.infos == ["Dwelt indeed.", "Abode is.", "Dwelt not."]


def test_coppy_refuses_overwrite(core, workspace: Path) -> None:
    (workspace / "a.txt").write_text("one", encoding="utf-8")
    (workspace / "b.txt").write_text("two", encoding="utf-8")

    _run(core, "coppy a.txt c.txt")
    _run(core, "coppy a.txt b.txt")

    assert (workspace / "c.txt").read_text(encoding="utf-8") == "one"
    assert (workspace / "b.txt").read_text(encoding="utf-8") == "two"
    assert core.output.errors == ["mysh: b.txt: File already exists"]
    assert core.output.infos == []


def test_coppyabode_prints_each_copied_file(core, workspace: Path) -> None:
    (workspace / "src").mkdir()
    (workspace / "src" / "a.txt").write_text("a", encoding="utf-8")

    _run(core, "coppyabode ./src dst")

    assert (workspace / "dst" / "a.txt").read_text(encoding="utf-8") == "a"
    assert core.output.infos == ["mysh: src/a.txt => dst/a.txt"]


def test_movetodir_changes_directory(core, workspace: Path) -> None:
    (workspace / "sub").mkdir()

    _run(core, "movetodir sub")
    _run(core, "movetodir nowhere")

    assert Path.cwd() == workspace / "sub"
    assert core.output.errors == ["mysh: nowhere: Not a directory"]


def test_dispatcher_lists_verbs(core) -> None:
    assert core.dispatcher.verbs == sorted(
        [
            "background",
            "byebye",
            "coppy",
            "coppyabode",
            "dwelt",
            "history",
            "maik",
            "movetodir",
            "repeat",
            "replay",
            "start",
            "terminate",
            "terminateall",
        ]
    )
