'''
Calculator session: turns button presses into tokens and tokens into text.

All mutable state of a calculation lives here. Which presses are accepted is
decided by the input state machine alone; what a press does to the number
being typed is decided by accumulate().
'''

from enum import Enum
import logging
import math

from .engine import Engine
from .fsm import (Clear, Digit, Dot, Equal, InputState, Negate, OperatorTap,
                  accepts, transition)
from .tokens import Number, Operator, OperatorSymbol
from .util import (CalcError, InvalidInput, MathError, TooManyDigits,
                   countdigits, formatnumber)


logger = logging.getLogger(__name__)


class ErrorPolicy(Enum):
    '''
    What to do with a press the state machine considers illegal.
    '''
    # Drop it, carry on as if it never happened.
    IGNORE = 'ignore'
    # Show an error, refuse everything but Clear.
    BLOCK = 'block'


def accumulate(state, event, numeral, max_digits):
    '''
    Return numeral after a digit, dot or negate press, or None if rejected.

    Pure. state is the state before the press; anything but ENTERING_NUMBER
    means a fresh number.
    '''
    if state is not InputState.ENTERING_NUMBER:
        numeral = ''
    if isinstance(event, Digit):
        if numeral in ('0', '-0'):
            if event.value == 0:
                return None
            # First significant digit replaces the bare zero.
            new = numeral[:-1] + str(event.value)
        else:
            new = numeral + str(event.value)
    elif isinstance(event, Dot):
        if '.' in numeral:
            return None
        new = (numeral or '0') + '.'
    elif isinstance(event, Negate):
        if not numeral:
            return None
        return numeral[1:] if numeral.startswith('-') else '-' + numeral
    else:
        raise TypeError('Cannot accumulate {!r}'.format(event))
    if countdigits(new) > max_digits:
        return None
    return new


def _parse(numeral, finite=True):
    '''
    Return numeral as float, or None if it is no number.

    With finite, infinities count as no number too.
    '''
    try:
        value = float(numeral)
    except ValueError:
        return None
    if finite and not math.isfinite(value):
        return None
    return value


class Session:
    '''
    One calculator, driven by discrete button presses.

    Read display_text and expression_text after each press. Not thread-safe;
    meant to be owned by a single event loop.
    '''

    DEFAULT_MAX_DIGITS = 10
    DEFAULT_KEEP_EXPRESSION = False
    DEFAULT_ERROR_POLICY = ErrorPolicy.IGNORE
    DEFAULT_DISPLAY = '0'

    # Stateless, so shared.
    ENGINE = Engine()

    # States in which no number is being typed.
    _IDLE = frozenset({InputState.START,
                       InputState.AFTER_OPERATOR,
                       InputState.AFTER_EQUAL})

    def __init__(self, max_digits=None, keep_expression=None,
                 error_policy=None, engine=None):
        '''
        Create cleared session.

        :param max_digits: Most digits allowed in input and results.
        :param keep_expression: Keep the expression, with result, after equal.
        :param error_policy: An ErrorPolicy, or its value.
        :param engine: Expression engine; the shared one by default.
        '''
        cls = type(self)
        if max_digits is None:
            max_digits = cls.DEFAULT_MAX_DIGITS
        if max_digits < 1:
            raise CalcError('Digit limit must be positive, not {}'.format(
                max_digits))
        if keep_expression is None:
            keep_expression = cls.DEFAULT_KEEP_EXPRESSION
        if error_policy is None:
            error_policy = cls.DEFAULT_ERROR_POLICY
        self.max_digits = max_digits
        self.keep_expression = keep_expression
        self.error_policy = ErrorPolicy(error_policy)
        self.engine = engine or cls.ENGINE
        self._reset()

    @property
    def state(self):
        return self._state

    @property
    def display_text(self):
        return self._display

    @property
    def expression_text(self):
        return self._expression

    @property
    def numeral(self):
        return self._numeral

    @property
    def tokens(self):
        return tuple(self._tokens)

    def digit(self, n):
        self.feed(Digit(n))

    def dot(self):
        self.feed(Dot())

    def negate(self):
        self.feed(Negate())

    def operator(self, op):
        '''
        Press operator button; op is an Operator or its symbol.
        '''
        if not isinstance(op, Operator):
            op = Operator.fromsymbol(op)
        self.feed(OperatorTap(op))

    def equal(self):
        self.feed(Equal())

    def clear(self):
        self.feed(Clear())

    def feed(self, event):
        '''
        Apply one input event.
        '''
        before = self._state
        if before is InputState.ERROR and not isinstance(event, Clear):
            logger.debug('Blocked %s until cleared', event)
            return
        if isinstance(event, Dot) and before in type(self)._IDLE:
            # A bare dot means "0."
            self.feed(Digit(0))
            before = self._state
        after = transition(before, event)
        if after is InputState.ERROR:
            self._illegal(event)
        elif not accepts(before, event):
            logger.debug('Nothing to do for %s in %s', event, before)
        elif isinstance(event, (Digit, Dot, Negate)):
            self._edit(event, after)
        elif isinstance(event, OperatorTap):
            self._pushoperator(event.operator, after)
        elif isinstance(event, Equal):
            self._evaluate(after)
        elif isinstance(event, Clear):
            self._reset()
        else:
            raise TypeError('Not an input event: {!r}'.format(event))
        if self._state is not before:
            logger.debug('%s: %s -> %s', event, before, self._state)

    def _edit(self, event, after):
        numeral = accumulate(self._state, event, self._numeral,
                             self.max_digits)
        if numeral is None:
            logger.debug('Rejected %s on %r', event, self._numeral)
            return
        self._numeral = numeral
        self._display = numeral
        self._state = after
        self._updateexpression()

    def _pushoperator(self, op, after):
        value = _parse(self._numeral)
        if value is None:
            logger.debug('No operand for %s in %r', op, self._numeral)
            return
        self._tokens.extend((Number(value), OperatorSymbol(op)))
        self._numeral = ''
        self._state = after
        self._updateexpression()

    def _evaluate(self, after):
        # Left for the engine to reject if too large.
        value = _parse(self._numeral, finite=False)
        if value is not None:
            self._tokens.append(Number(value))
        try:
            result = self.engine.evaluate(tuple(self._tokens))
            if result is None:
                self._reset()
                return
            text = formatnumber(result)
            if countdigits(text) > self.max_digits:
                raise TooManyDigits()
        except MathError as e:
            logger.debug('Evaluation failed: %s', e.message)
            self._reset(e.message)
            return
        logger.debug('%s = %s', self._expression, text)
        if self.keep_expression:
            self._expression = '{} = {}'.format(self._expression, text)
        else:
            self._expression = ''
        self._tokens.clear()
        # Kept so that an operator right after equal continues from it.
        self._numeral = text
        self._display = text
        self._state = after

    def _illegal(self, event):
        if self.error_policy is ErrorPolicy.BLOCK:
            logger.debug('Illegal %s in %s, blocking', event, self._state)
            self._reset(InvalidInput().message, state=InputState.ERROR)
        else:
            logger.debug('Illegal %s in %s, ignored', event, self._state)

    def _reset(self, display=None, state=InputState.START):
        self._numeral = ''
        self._tokens = []
        self._display = type(self).DEFAULT_DISPLAY if display is None \
            else display
        self._expression = ''
        self._state = state

    def _render(self, token):
        if isinstance(token, Number):
            return formatnumber(token.value)
        elif isinstance(token, OperatorSymbol):
            return token.operator.symbol
        raise TypeError('Not a token: {!r}'.format(token))

    def _updateexpression(self):
        parts = [self._render(token) for token in self._tokens]
        if self._numeral:
            parts.append(self._numeral)
        self._expression = ' '.join(parts)
