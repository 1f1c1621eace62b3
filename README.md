# minishell

The execution half of a small POSIX-style shell. It takes commands that have
already been split into words and redirections and runs them. A lone builtin
runs in the shell's own process. Other programs are found through `PATH`.
Pipelines of any length are joined stdout to stdin.

## What it does

- **Builtins** (`minishell.builtins`): `echo`, `cd`, `pwd`, `export`,
  `unset`, `env` and `exit`.
  - `is_builtin` also accepts these names in upper case, except `exit`.
  - `echo` drops the newline after one or more leading `-n`, `-nn`, ...
    flags. When its first argument is the literal word `$?` it prints the
    last status.
  - `cd` with no argument goes to `HOME`. It updates `PWD` and `OLDPWD` and
    reports `HOME not set` when it cannot change there.
  - `pwd` prints the value of `PWD`.
  - `export` with no arguments lists every variable sorted by name, in
    `declare -x` form. `export NAME` declares a name without a value, and
    `export NAME+=more` appends to the current value. A bad name is reported
    as `not a valid identifier` and gives status 1.
  - `unset` removes variables. A bad name is reported the same way.
  - `env` prints every variable that has a value.
  - `exit` raises `ShellExit`, carrying the status the shell should end
    with. A non-numeric argument gives `numeric argument required` and
    status 255. With more than one argument it reports `too many arguments`,
    returns 1 and does not leave.
- **Environment** (`minishell.environment`): `Environment` keeps variables in
  insertion order. A value of `None` marks a name declared without a value.
  `to_envp()` gives `NAME=VALUE` strings for the variables that have values.
  `split_entry` and `is_valid_name` are the helpers it uses.
- **Redirections** (`minishell.redirections`): input files, output files,
  append files and here-documents.
  - `prepare_files` walks the targets in order. It creates every output
    target and checks that every input file exists and is readable. It
    reports an ambiguous redirect for a target listed in
    `ambiguous_indexes` that is empty or contains blanks.
  - `open_redirections` then opens only the last input and the last output
    target.
  - A here-document is read from the file `heredoc_path(name)`
    (`/tmp/_<name>`), which is removed once opened.
- **Command lookup** (`minishell.pathsearch`): `resolve_command(name, envp)`.
  - Without a `PATH` entry the name is used as given. A directory gives
    status 126, and an existing regular file that is not executable gives
    `Permission denied` with 126.
  - With a `PATH` entry that lists no directories, the result is
    `No such file or directory` with 127.
  - A name containing `/` is checked directly: a directory gives 126, a
    file without execute permission gives 126, and a missing file gives 127.
  - Any other name is searched in the `PATH` directories. When it is not
    found the result is `commande not found` with 127.
  - Failures are raised as `CommandFailure`, which carries the message and
    the exit status.
- **Exit status** (`minishell.status`): `exit_status_from_returncode` turns a
  child's return code into a status. A child killed by a signal gives 128
  plus the signal number. `Quit 3` is printed when the last command of a
  line ends on `SIGQUIT`.
- **Running** (`minishell.executor`):
  - `execute(commands, state, stdin, stdout, stderr)` runs a parsed line.
    An empty line with no redirections leaves the status unchanged.
  - `run_single` runs one command. A builtin runs in the shell itself and
    may change `state`.
  - `run_pipeline` runs every stage apart from the shell. A builtin inside
    a pipeline works on a copy of the environment, so its changes are not
    kept.
  - Afterwards `state.exit_status` holds what `$?` would show.

## Modules

| Module | Contents |
| --- | --- |
| `minishell.textutils` | `atoi`, `compare_command_name`, `split_nonempty` |
| `minishell.errors` | `ShellExit`, `CommandFailure` and functions building each error message |
| `minishell.environment` | `Environment`, `split_entry`, `is_valid_name` |
| `minishell.command` | `Redirections`, `Command`, `ShellState` |
| `minishell.builtins` | `is_builtin`, `run_builtin`, `echo`, `cd`, `pwd`, `export`, `unset`, `env`, `exit_builtin`, `is_numeric`, `is_valid_identifier`, `split_assignment` |
| `minishell.pathsearch` | `FileKind`, `file_kind`, `search_path`, `resolve_command` |
| `minishell.redirections` | `last_input_index`, `last_output_index`, `is_ambiguous`, `heredoc_path`, `prepare_files`, `open_redirections` |
| `minishell.status` | `exit_status_from_returncode` |
| `minishell.executor` | `execute`, `run_single`, `run_pipeline` |

## Example

```python
import io

from minishell.command import Command, Redirections, ShellState
from minishell.environment import Environment
from minishell.executor import execute

env = Environment.from_strings(["HOME=/tmp", "PATH=/usr/bin:/bin"])
state = ShellState(env, 0)
out, err = io.StringIO(), io.StringIO()

execute([Command(["export", "GREETING=hello"])], state, io.StringIO(), out, err)
print(state.env.get("GREETING"))    # hello

execute([Command(["echo", "-n", "hi"])], state, io.StringIO(), out, err)
print(repr(out.getvalue()))         # 'hi'

execute(
    [Command(["echo", "saved"], Redirections(all_files=["/tmp/out.txt"],
                                             outfiles=["/tmp/out.txt"]))],
    state, io.StringIO(), out, err,
)
```

## What it does not do

The package has no command reader and no parser. It does not prompt, read
lines, split words, expand variables or quotes, or handle signals at the
prompt. Here-document files must already have been written to
`heredoc_path(name)` by whatever collected them. There is no command-line
program; the package is used from Python.

## Requirements

Python 3.10 or later on a POSIX system. There are no third-party
dependencies; the tests use pytest (`pip install .[test]`).