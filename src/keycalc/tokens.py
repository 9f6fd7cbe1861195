'''
Tokens the expression engine consumes.

There are exactly two kinds: numbers and operators. The session assembles
them one button press at a time; nothing here ever looks at raw text beyond
an operator's own symbol.
'''

from dataclasses import dataclass
from enum import Enum

from .util import wrap_user_errors


class Operator(Enum):
    '''
    Binary arithmetic operator, valued by its display symbol.
    '''
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'

    @property
    def symbol(self):
        return self.value

    @property
    def precedence(self):
        return _PRECEDENCE[self]

    @classmethod
    @wrap_user_errors('No such operator {1!r}')
    def fromsymbol(cls, symbol):
        return cls(symbol)

    def __str__(self):
        return self.value


_PRECEDENCE = {
    Operator.ADD: 1,
    Operator.SUBTRACT: 1,
    Operator.MULTIPLY: 2,
    Operator.DIVIDE: 2,
}


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class OperatorSymbol:
    operator: Operator


# Closed set. Code matching on tokens raises on anything else.
TOKEN_TYPES = (Number, OperatorSymbol)
