from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    ConstantError,
    NiklasSyntaxError,
    NiklasTypeError,
    UnknownVariableError,
    run_runtime_case,
    run_with_output,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var n = 0
            repeat 3 { n++ }
            n
            """
        ),
        ("number", 3),
        None,
        id="repeat-counts",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0
            repeat 0 { n++ }
            repeat -2 { n++ }
            n
            """
        ),
        ("number", 0),
        None,
        id="repeat-non-positive",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0
            repeat 1 + 1 { n = n + 10 }
            n
            """
        ),
        ("number", 20),
        None,
        id="repeat-expression-count",
    ),
    pytest.param('repeat "3" { }', None, NiklasTypeError, id="repeat-string-count"),
    pytest.param("repeat 3 n++", None, NiklasSyntaxError, id="repeat-missing-block"),
    pytest.param(
        dedent(
            """\
            var total = 0
            repeat 3 { var fresh = 1 total = total + fresh }
            total
            """
        ),
        ("number", 3),
        None,
        id="repeat-fresh-scope-per-iteration",
    ),
    pytest.param(
        dedent(
            """\
            repeat 2 { val once = 1 }
            """
        ),
        None,
        None,
        id="repeat-constant-per-iteration",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0
            var sum = 0
            while i < 5 { sum = sum + i i++ }
            sum
            """
        ),
        ("number", 10),
        None,
        id="while-sum",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0
            while false { n++ }
            n
            """
        ),
        ("number", 0),
        None,
        id="while-never-runs",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0
            while (i < 3) && true { i++ }
            i
            """
        ),
        ("number", 3),
        None,
        id="while-parenthesized-condition",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0
            var j = 0
            while i < 3 { i++ while j < i { j++ } }
            j
            """
        ),
        ("number", 3),
        None,
        id="while-nested",
    ),
    pytest.param(
        dedent(
            """\
            var sum = 0
            from 0 to 5 with i { sum = sum + i }
            sum
            """
        ),
        ("number", 10),
        None,
        id="from-to-sum",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0
            from 2 to 5 { n++ }
            n
            """
        ),
        ("number", 3),
        None,
        id="from-to-without-binder",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0
            from 5 to 2 { n++ }
            n
            """
        ),
        ("number", 0),
        None,
        id="from-to-empty-range",
    ),
    pytest.param(
        dedent(
            """\
            val a = 3
            val b = 8
            var n = 0
            from a to b with i { assert i > a - 1 && i < b n++ }
            n
            """
        ),
        ("number", 5),
        None,
        id="from-to-bounds-hold",
    ),
    pytest.param(
        "from 0 to 3 with i { i = 5 }",
        None,
        ConstantError,
        id="from-to-binder-final",
    ),
    pytest.param(
        "from 0 to 3 with i { i++ }",
        None,
        ConstantError,
        id="from-to-binder-no-increment",
    ),
    pytest.param(
        dedent(
            """\
            from 0 to 3 with i { }
            i
            """
        ),
        None,
        UnknownVariableError,
        id="from-to-binder-scoped",
    ),
    pytest.param('from "a" to 3 { }', None, NiklasTypeError, id="from-string-bound"),
    pytest.param("from 0 to true { }", None, NiklasTypeError, id="to-bool-bound"),
    pytest.param("from 0 3 { }", None, NiklasSyntaxError, id="from-missing-to"),
    pytest.param("from 0 to 3 with { }", None, NiklasSyntaxError, id="with-missing-name"),
    pytest.param("from 0 to 3", None, NiklasSyntaxError, id="from-to-missing-block"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_loops(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize(
    "start, stop",
    [
        pytest.param(0, 0, id="empty"),
        pytest.param(0, 4, id="from-zero"),
        pytest.param(-3, 2, id="negative-start"),
        pytest.param(7, 1, id="reversed"),
    ],
)
def test_from_to_runs_half_open_range(start: int, stop: int) -> None:
    source = f"from {start} to {stop} with i {{ assert i > {start} - 1 && i < {stop} print(i, \"\") }}"
    expected = "".join(f"{i} " for i in range(start, stop))

    assert run_with_output(source) == expected


def test_repeat_runs_block_each_time() -> None:
    assert run_with_output("repeat 3 { println(1) }") == "1\n1\n1\n"
