import pytest

from tickle.config import InterpConfig
from tickle.interpreter import Interp
from tickle.types.signal import Break, Continue, Error, Ok, Return
from tickle.types.value import Value

# -----------------------------------------------------
# Core evaluation
# -----------------------------------------------------

def test_expr_after_set(run):
    assert run("set x 5; expr {$x + 1}") == "6"


def test_nested_command_substitution(run):
    assert run("set y [expr {2*3}]; set y") == "6"


def test_empty_script_is_ok(interp):
    assert interp.eval("") == Ok()
    assert interp.eval("   ;;\n# only a comment\n") == Ok()


def test_last_command_gives_result(run):
    assert run("set a 1\nset b 2") == "2"


def test_unknown_command(interp):
    result = interp.eval("bogus 1 2")
    assert result == Error('invalid command name "bogus"')
    assert result.kind == "NameError"


def test_error_stops_evaluation(interp):
    result = interp.eval("set a 1; bogus; set a 2")
    assert isinstance(result, Error)
    assert interp.get_var("a") == Value("1")


def test_earlier_commands_run_before_syntax_error(interp):
    result = interp.eval("set a 1\nset b {")
    assert result == Error("missing close-brace")
    assert interp.get_var("a") == Value("1")


def test_foreach_break_terminates(interp):
    result = interp.eval("foreach i {1 2 3} {if {$i == 2} {break}}")
    assert result == Ok()
    assert interp.get_var("i") == Value("2")


def test_missing_variable(fails):
    assert fails("set a $nope") == 'can\'t read "nope": no such variable'


def test_division_by_zero_is_an_error(interp):
    result = interp.eval("expr {1 / 0}")
    assert result == Error("divide by zero")
    assert result.kind == "RuntimeError"


def test_word_concatenation(run):
    run("set a x; set b y")
    assert run("set c $a-$b-[set a]") == "x-y-x"


def test_quoted_words_substitute(run):
    run("set name World")
    assert run('set greeting "Hello, $name!"') == "Hello, World!"


def test_braced_words_do_not_substitute(run):
    assert run("set a {$nope [bogus]}") == "$nope [bogus]"


def test_array_style_names_are_flat(run):
    run("set i 2; set arr(2) two")
    assert run("set arr($i)") == "two"
    assert run("set x $arr($i)") == "two"


def test_single_substitution_keeps_value_object(interp):
    v = Value.from_list(["a", "b c"])
    interp.set_var("lst", v)
    result = interp.eval("set copy $lst")
    assert result.value is v


def test_return_at_top_level(interp):
    assert interp.eval("return 5; set a 1") == Return(Value("5"))


def test_return_inside_brackets_is_spliced(run):
    assert run("set a [return inner]") == "inner"


def test_break_and_continue_escape_eval(interp):
    assert interp.eval("break") == Break()
    assert interp.eval("continue") == Continue()

# -----------------------------------------------------
# Error trail
# -----------------------------------------------------

def test_error_trail(interp):
    result = interp.eval("proc p {} {error oops}\np")
    assert result.message == "oops"
    assert result.trail == (
        '    while executing\n"error oops"',
        '    (procedure "p")',
        '    invoked from within\n"p"',
    )
    assert result.error_info.startswith("oops\n    while executing")

# -----------------------------------------------------
# Procedures and aliases
# -----------------------------------------------------

def test_procedure_call(run):
    run("proc add {a b} {expr {$a + $b}}")
    assert run("add 2 3") == "5"


def test_procedure_return(run):
    run("proc early {} {return first; set x second}")
    assert run("early") == "first"


def test_procedure_locals_do_not_leak(interp, run):
    run("proc p {} {set local 1}")
    run("p")
    assert interp.get_var("local") is None


def test_recursion(run):
    run("proc fact {n} {if {$n <= 1} {return 1}; expr {$n * [fact [expr {$n - 1}]]}}")
    assert run("fact 10") == "3628800"


def test_alias_symmetry(run):
    run("""
        proc bump {name} {
            upvar $name v
            set seen $v
            incr v
            return $seen
        }
    """)
    run("set counter 7")
    assert run("bump counter") == "7"
    assert run("set counter") == "8"


def test_alias_sees_caller_mutation(run):
    run("""
        proc watch {} {
            upvar 1 shared s
            set before $s
            uplevel_set
            list $before $s
        }
        proc uplevel_set {} {
            global shared
            set shared changed
        }
    """)
    run("set shared original")
    assert run("watch") == "original changed"

# -----------------------------------------------------
# Host API
# -----------------------------------------------------

def test_set_and_get_var(interp):
    assert interp.set_var("n", 3) == Value("3")
    assert interp.get_var("n").as_int() == 3
    assert interp.get_var("missing") is None


def test_register_native_command(interp, run):
    def square(interp, argv):
        n = argv[1].as_int()
        return Ok(Value(n * n))

    interp.register_command("square", 2, 2, "n", square)
    assert run("square 7") == "49"
    assert interp.eval("square") == Error('wrong # args: should be "square n"')


def test_native_command_exceptions_become_errors(interp):
    def strict(interp, argv):
        return Ok(Value(argv[1].as_int()))

    interp.register_command("strict", 2, 2, "n", strict)
    result = interp.eval("strict abc")
    assert result.message == 'expected integer but got "abc"'
    assert result.kind == "TypeError"


def test_check_args_reexported():
    assert Interp.check_args(1, [Value("x")], 1, 1, "") == Ok()


def test_eval_accepts_value(interp):
    assert interp.eval(Value("set a 9")) == Ok(Value("9"))


def test_interp_without_builtins():
    bare = Interp(builtins=False)
    assert len(bare.commands) == 0
    assert bare.eval("set a 1") == Error('invalid command name "set"')

# -----------------------------------------------------
# Limits
# -----------------------------------------------------

def test_infinite_recursion_is_stopped(interp):
    interp.eval("proc forever {} {forever}")
    result = interp.eval("forever")
    assert result.message == "too many nested evaluations"
    assert result.kind == "RuntimeError"
    assert interp.scope.depth == 1


def test_nesting_limit_is_configurable():
    interp = Interp(InterpConfig(max_nesting=5))
    interp.eval("proc down {n} {if {$n > 0} {down [expr {$n - 1}]}}")
    assert interp.eval("down 1") == Ok()
    assert interp.eval("down 10").message == "too many nested evaluations"


def test_command_limit():
    interp = Interp(InterpConfig(command_limit=50))
    result = interp.eval("while 1 {set a 1}")
    assert result.message == "command limit exceeded"
    # The count resets on each top-level eval.
    assert interp.eval("set a 2") == Ok(Value("2"))


def test_time_limit():
    interp = Interp(InterpConfig(time_limit=0.05))
    result = interp.eval("while 1 {incr i}")
    assert result.message == "time limit exceeded"


@pytest.mark.parametrize("script", ["set a 1", "proc p {} {}", "list a b"])
def test_repr(interp, script):
    interp.eval(script)
    assert repr(interp).startswith("<Interp commands=")
