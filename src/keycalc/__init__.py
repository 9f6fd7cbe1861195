'''
Keypad calculator.

The arithmetic core of a pocket calculator: button presses in, two lines of
text out. Presses are checked against an input state machine, typed numbers
are collected into number and operator tokens, and on equal the tokens are
evaluated with the usual precedence (shunting-yard, then a postfix stack
machine).

Plain arithmetic only. No parentheses, no memory, no persistence.
'''

from .cli import CLI
from .engine import Engine
from .fsm import InputState, transition
from .keypad import Keypad
from .session import ErrorPolicy, Session
from .tokens import Number, Operator, OperatorSymbol


__all__ = ('Engine', 'Session', 'ErrorPolicy', 'InputState', 'transition',
           'Operator', 'Number', 'OperatorSymbol', 'Keypad', 'CLI')
