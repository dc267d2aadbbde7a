from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    NiklasAssertionError,
    NiklasSyntaxError,
    UnknownVariableError,
    run_runtime_case,
    run_with_output,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var r = 0
            if true { r = 1 }
            r
            """
        ),
        ("number", 1),
        None,
        id="if-true",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if false { r = 1 }
            r
            """
        ),
        ("number", 0),
        None,
        id="if-false-no-else",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if 1 > 2 { r = 1 } else { r = 2 }
            r
            """
        ),
        ("number", 2),
        None,
        id="if-else",
    ),
    pytest.param(
        "if false { assert false } else if true { assert true } else { assert false }",
        None,
        None,
        id="else-if-chain",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if false { r = 1 } else if false { r = 2 } else if true { r = 3 } else { r = 4 }
            r
            """
        ),
        ("number", 3),
        None,
        id="else-if-third-branch",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if true { r = 1 } else if undefinedName { r = 2 } else { r = 3 }
            r
            """
        ),
        ("number", 1),
        None,
        id="skipped-condition-not-evaluated",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if false { r = 1 } else if undefinedName { r = 2 }
            """
        ),
        None,
        UnknownVariableError,
        id="reached-condition-is-evaluated",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if true { if false { r = 1 } else { r = 2 } } else { r = 3 }
            r
            """
        ),
        ("number", 2),
        None,
        id="nested-if",
    ),
    pytest.param(
        dedent(
            """\
            var r = ""
            if 0 { r = "number" } else if "" { r = "string" } else { r = "none" }
            r
            """
        ),
        ("string", "none"),
        None,
        id="falsy-values",
    ),
    pytest.param(
        dedent(
            """\
            var r = 0
            if "x" { r = 1 }
            r
            """
        ),
        ("number", 1),
        None,
        id="non-empty-string-truthy",
    ),
    pytest.param(
        dedent(
            """\
            if true { var inner = 1 }
            inner
            """
        ),
        None,
        UnknownVariableError,
        id="branch-scope-released",
    ),
    pytest.param("if true r = 1", None, NiklasSyntaxError, id="if-missing-brace"),
    pytest.param("if true { r = 1", None, NiklasSyntaxError, id="if-unclosed-brace"),
    pytest.param("if false { } else r", None, NiklasSyntaxError, id="else-missing-brace"),
    pytest.param("assert 1 == 1", None, None, id="assert-pass"),
    pytest.param("assert 1 == 2", None, NiklasAssertionError, id="assert-fail"),
    pytest.param("assert 0", None, NiklasAssertionError, id="assert-falsy-number"),
    pytest.param("assert (1 == 2 || 2 == 3 || 3 == 3)", None, None, id="assert-or-chain"),
    pytest.param(
        dedent(
            """\
            // line comment with { brace
            /* block comment with } brace */
            var x = 1
            /* multi
               line { } */
            x
            """
        ),
        ("number", 1),
        None,
        id="comments-ignored",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1
            if true {
                // nested comment }
                x = 2
            }
            x
            """
        ),
        ("number", 2),
        None,
        id="comment-inside-block",
    ),
    pytest.param("var x = 1\n}", None, NiklasSyntaxError, id="stray-closing-brace"),
    pytest.param("return 1", None, NiklasSyntaxError, id="return-at-root"),
    pytest.param(
        dedent(
            """\
            if true { return 7 }
            99
            """
        ),
        ("number", 7),
        None,
        id="return-from-top-level-block",
    ),
    pytest.param(
        dedent(
            """\
            repeat 3 { return 5 }
            println(1)
            """
        ),
        ("number", 5),
        None,
        id="return-from-loop-ends-program",
    ),
    pytest.param(
        dedent(
            """\
            var x = 0
            if false { x = 1 } // not taken
            else { x = 2 }
            x
            """
        ),
        ("number", 2),
        None,
        id="line-comment-before-else",
    ),
    pytest.param(
        dedent(
            """\
            var x = 0
            if false { x = 1 }
            /* try the next one */ else if true { x = 2 }
            // fallback
            else { x = 3 }
            x
            """
        ),
        ("number", 2),
        None,
        id="comments-between-branches",
    ),
    pytest.param(
        dedent(
            """\
            var x = 0
            if true { x = 1 } // taken
            else { x = 2 }
            x
            """
        ),
        ("number", 1),
        None,
        id="comment-before-skipped-else",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_assert_message_names_the_condition() -> None:
    with pytest.raises(NiklasAssertionError) as exc_info:
        run_with_output("var a = 1\nassert a == 2")

    err = exc_info.value
    assert "Assertion failed: a == 2" in str(err)
    assert (err.line, err.column) == (2, 1)


def test_only_taken_branch_runs() -> None:
    source = dedent(
        """\
        if 1 < 2 { println("a") } else if true { println("b") } else { println("c") }
        println("after")
        """
    )

    assert run_with_output(source) == "a\nafter\n"


def test_return_from_top_level_block_skips_rest() -> None:
    assert run_with_output("repeat 3 { return 5 }\nprintln(1)") == ""


def test_comment_after_lone_if_keeps_next_statement() -> None:
    source = dedent(
        """\
        if false { println("a") } // no else here
        println("b")
        """
    )

    assert run_with_output(source) == "b\n"
