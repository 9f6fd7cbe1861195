'''
Input state machine.

Says which button presses make sense in which state. Pure: the session owns
the current state and asks here what comes next.
'''

from dataclasses import dataclass
from enum import Enum

from .tokens import Operator


class InputState(Enum):
    START = 'Start'
    ENTERING_NUMBER = 'EnteringNumber'
    AFTER_OPERATOR = 'AfterOperator'
    AFTER_EQUAL = 'AfterEqual'
    ERROR = 'Error'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Digit:
    value: int

    def __post_init__(self):
        if not 0 <= self.value <= 9:
            raise ValueError('Not a digit: {!r}'.format(self.value))

    def __str__(self):
        return 'Digit({})'.format(self.value)


@dataclass(frozen=True)
class Dot:
    def __str__(self):
        return 'Dot'


@dataclass(frozen=True)
class Negate:
    def __str__(self):
        return 'Negate'


@dataclass(frozen=True)
class OperatorTap:
    operator: Operator

    def __str__(self):
        return 'Operator({})'.format(self.operator)


@dataclass(frozen=True)
class Equal:
    def __str__(self):
        return 'Equal'


@dataclass(frozen=True)
class Clear:
    def __str__(self):
        return 'Clear'


EVENT_TYPES = (Digit, Dot, Negate, OperatorTap, Equal, Clear)


# (state, event type) -> next state, for everything but Clear.
RULES = {
    # Starting a number
    (InputState.START, Digit): InputState.ENTERING_NUMBER,
    (InputState.AFTER_OPERATOR, Digit): InputState.ENTERING_NUMBER,
    # Still the same number
    (InputState.ENTERING_NUMBER, Digit): InputState.ENTERING_NUMBER,
    (InputState.ENTERING_NUMBER, Dot): InputState.ENTERING_NUMBER,
    (InputState.ENTERING_NUMBER, Negate): InputState.ENTERING_NUMBER,
    # Number done
    (InputState.ENTERING_NUMBER, OperatorTap): InputState.AFTER_OPERATOR,
    (InputState.ENTERING_NUMBER, Equal): InputState.AFTER_EQUAL,
    # Fresh number, or continue from the result (2 = + 3)
    (InputState.AFTER_EQUAL, Digit): InputState.ENTERING_NUMBER,
    (InputState.AFTER_EQUAL, OperatorTap): InputState.AFTER_OPERATOR,
    # Operator or equal with nothing to apply it to
    (InputState.START, OperatorTap): InputState.ERROR,
    (InputState.START, Equal): InputState.ERROR,
    (InputState.AFTER_OPERATOR, OperatorTap): InputState.ERROR,
    (InputState.AFTER_EQUAL, Equal): InputState.ERROR,
}


def _eventtype(event):
    if not isinstance(event, EVENT_TYPES):
        raise TypeError('Not an input event: {!r}'.format(event))
    return type(event)


def transition(state, event):
    '''
    Return state after event. Unlisted pairs leave the state as is.
    '''
    kind = _eventtype(event)
    if kind is Clear:
        return InputState.START
    return RULES.get((state, kind), state)


def accepts(state, event):
    '''
    Return True if event legally moves the machine, even onto itself.

    False both for illegal events (those leading to ERROR) and for events
    the machine has no rule for.
    '''
    kind = _eventtype(event)
    if kind is Clear:
        return True
    return RULES.get((state, kind), InputState.ERROR) is not InputState.ERROR
