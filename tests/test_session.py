'''
Calculator session tests
'''

from keycalc.engine import Engine
from keycalc.fsm import Digit, Dot, InputState, Negate
from keycalc.session import ErrorPolicy, Session, accumulate
from keycalc.tokens import Number, Operator, OperatorSymbol
from keycalc.util import CalcError, DivisionByZero

from pytest import mark, raises


def test_initial(session):
    assert session.display_text == '0'
    assert session.expression_text == ''
    assert session.state is InputState.START
    assert session.tokens == ()


def test_no_double_zero(session, press):
    press(session, '00')
    assert session.numeral == '0'
    assert session.display_text == '0'


def test_zero_replaced(session, press):
    press(session, '07')
    assert session.numeral == '7'


def test_zero_after_dot(session, press):
    press(session, '0.0')
    assert session.numeral == '0.0'


def test_single_dot(session, press):
    press(session, '1..5.')
    assert session.numeral == '1.5'


def test_bare_dot(session, press):
    press(session, '.5')
    assert session.numeral == '0.5'
    assert session.state is InputState.ENTERING_NUMBER


def test_bare_dot_after_operator(session, press):
    press(session, '1+.')
    assert session.numeral == '0.'
    assert session.expression_text == '1 + 0.'


def test_negate_empty(session):
    session.negate()
    assert session.numeral == ''
    assert session.display_text == '0'
    assert session.state is InputState.START


def test_negate_toggles(session, press):
    press(session, '12_')
    assert session.display_text == '-12'
    press(session, '_')
    assert session.display_text == '12'


def test_negative_zero_replaced(session, press):
    press(session, '0_5')
    assert session.numeral == '-5'


def test_max_digits(press):
    session = press(Session(max_digits=3), '1234')
    assert session.numeral == '123'
    # The point is not a digit.
    press(session, '.4')
    assert session.numeral == '123.'


def test_max_digits_ignores_punctuation(press):
    session = press(Session(max_digits=3), '1.2_3')
    assert session.numeral == '-1.23'


def test_bad_max_digits():
    with raises(CalcError):
        Session(max_digits=0)


def test_expression_trace(session, press):
    press(session, '12+3*4')
    assert session.expression_text == '12 + 3 * 4'
    assert session.display_text == '4'
    assert session.tokens == (Number(12), OperatorSymbol(Operator.ADD),
                              Number(3), OperatorSymbol(Operator.MULTIPLY))


def test_trace_is_formatted(session, press):
    press(session, '1.50+')
    assert session.expression_text == '1.5 +'


def test_equal(session, press):
    press(session, '3+4*2=')
    assert session.display_text == '11'
    assert session.expression_text == ''
    assert session.tokens == ()
    assert session.state is InputState.AFTER_EQUAL


def test_left_associative(session, press):
    press(session, '10-2-3=')
    assert session.display_text == '5'


def test_keep_expression(press):
    session = press(Session(keep_expression=True), '2+3*4-1=')
    assert session.display_text == '13'
    assert session.expression_text == '2 + 3 * 4 - 1 = 13'


def test_chain_after_equal(session, press):
    press(session, '2=+3=')
    assert session.display_text == '5'


def test_digit_after_equal_starts_fresh(session, press):
    press(session, '2+2=7')
    assert session.numeral == '7'
    assert session.display_text == '7'
    assert session.expression_text == '7'


@mark.parametrize('keys, expected', [
    ('123', '123'),
    ('1.50', '1.5'),
    ('0.', '0'),
    ('12.000', '12'),
    ('9999999999', '9999999999'),
    ('0.00000001', '0.00000001'),
    ('3_', '-3'),
])
def test_number_round_trip(session, press, keys, expected):
    press(session, keys + '=')
    assert session.display_text == expected


def test_division_by_zero(session, press):
    press(session, '5/0=')
    assert session.display_text == DivisionByZero.MESSAGE
    assert session.expression_text == ''
    assert session.tokens == ()
    assert session.state is InputState.START


def test_new_number_after_error(session, press):
    press(session, '5/0=7+1=')
    assert session.display_text == '8'


def test_huge_number_too_large(press):
    session = press(Session(max_digits=400), '9' * 310 + '=')
    assert session.display_text == 'Number too large'
    assert session.state is InputState.START


def test_huge_operand_too_large(press):
    session = press(Session(max_digits=400), '1+' + '9' * 310 + '=')
    assert session.display_text == 'Number too large'


def test_too_many_digits(press):
    session = press(Session(max_digits=4), '9999*99=')
    assert session.display_text == 'Too many digits'
    assert session.state is InputState.START


def test_fraction_rounded(session, press):
    press(session, '2/3=')
    assert session.display_text == '0.666666667'


def test_operator_without_operand_ignored(session):
    session.operator('+')
    assert session.tokens == ()
    assert session.state is InputState.START
    assert session.display_text == '0'


def test_double_operator_ignored(session, press):
    press(session, '1+*2=')
    assert session.display_text == '3'


def test_equal_after_operator_ignored(session, press):
    press(session, '1+=')
    assert session.expression_text == '1 +'
    assert session.state is InputState.AFTER_OPERATOR


def test_block_policy(press):
    session = Session(error_policy=ErrorPolicy.BLOCK)
    press(session, '1++')
    assert session.state is InputState.ERROR
    assert session.display_text == 'Invalid input'
    press(session, '2=')
    assert session.state is InputState.ERROR
    assert session.display_text == 'Invalid input'
    press(session, 'C2*3=')
    assert session.display_text == '6'


def test_block_policy_by_value():
    assert Session(error_policy='block').error_policy is ErrorPolicy.BLOCK


def test_clear(session, press):
    press(session, '12+3')
    session.clear()
    assert session.display_text == '0'
    assert session.expression_text == ''
    assert session.numeral == ''
    assert session.tokens == ()
    assert session.state is InputState.START


def test_clear_idempotent(session, press):
    press(session, '12+3')
    session.clear()
    once = (session.display_text, session.expression_text,
            session.numeral, session.tokens, session.state)
    session.clear()
    assert (session.display_text, session.expression_text,
            session.numeral, session.tokens, session.state) == once


def test_action_methods(session):
    session.digit(4)
    session.operator(Operator.MULTIPLY)
    session.digit(2)
    session.dot()
    session.digit(5)
    session.equal()
    assert session.display_text == '10'


def test_unknown_operator(session):
    with raises(CalcError, match='No such operator'):
        session.operator('%')


def test_engine_shared():
    assert Session().engine is Session().engine


def test_custom_engine(press):
    class Nope(Engine):
        def evaluate(self, tokens):
            raise DivisionByZero()
    session = press(Session(engine=Nope()), '1+1=')
    assert session.display_text == 'Division by zero'


@mark.parametrize('state, event, numeral, expected', [
    (InputState.ENTERING_NUMBER, Digit(0), '0', None),
    (InputState.ENTERING_NUMBER, Digit(3), '0', '3'),
    (InputState.ENTERING_NUMBER, Digit(3), '0.', '0.3'),
    (InputState.START, Digit(0), '', '0'),
    (InputState.AFTER_EQUAL, Digit(1), '42', '1'),
    (InputState.ENTERING_NUMBER, Dot(), '4', '4.'),
    (InputState.ENTERING_NUMBER, Dot(), '4.2', None),
    (InputState.ENTERING_NUMBER, Negate(), '4', '-4'),
    (InputState.ENTERING_NUMBER, Negate(), '-4', '4'),
    (InputState.START, Negate(), '', None),
    (InputState.ENTERING_NUMBER, Digit(9), '99', None),
])
def test_accumulate(state, event, numeral, expected):
    assert accumulate(state, event, numeral, 2) == expected
