import pytest

from minishell.textutils import atoi, compare_command_name, split_nonempty


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        ("  \t-7", -7),
        ("+5abc", 5),
        ("", 0),
        ("abc", 0),
        ("-", 0),
    ],
)
def test_atoi_plain_values(text, expected):
    assert atoi(text) == expected


def test_atoi_negative_overflow_gives_zero():
    assert atoi("-9223372036854775808") == 0
    assert atoi("-9223372036854775807") == 0


def test_atoi_llong_max_wraps_to_c_int():
    assert atoi("9223372036854775807") == -1


def test_atoi_stops_at_inner_space():
    assert atoi("12 34") == 12


def test_compare_exact_match():
    assert compare_command_name("echo", "echo", False) == 0
    assert compare_command_name("echo", "echo", True) == 0


def test_compare_folds_upper_case_when_asked():
    assert compare_command_name("ECHO", "echo", True) == 0
    assert compare_command_name("Env", "env", True) == 0


def test_compare_is_case_sensitive_without_folding():
    assert compare_command_name("ECHO", "echo", False) < 0


def test_compare_does_not_fold_lower_to_upper():
    assert compare_command_name("exit", "EXIT", True) > 0


def test_compare_missing_name():
    assert compare_command_name(None, "env", True) == 1


def test_compare_prefix_does_not_match():
    assert compare_command_name("ech", "echo", True) < 0
    assert compare_command_name("echoo", "echo", True) > 0


def test_split_drops_empty_pieces():
    assert split_nonempty("/bin::/usr/bin:", ":") == ["/bin", "/usr/bin"]


def test_split_only_separators():
    assert split_nonempty(":::", ":") == []
    assert split_nonempty("", ":") == []


def test_split_round_trip_without_empties():
    text = "/usr/local/bin:/usr/bin:/bin"
    assert ":".join(split_nonempty(text, ":")) == text