from functools import reduce
import operator

import regex

from .fsm import Clear, Digit, Dot, Equal, Negate, OperatorTap
from .tokens import Operator
from .util import CalcError


class Keypad:
    '''
    Lexer from keystrokes to button presses.

    One key, one press. There is no grammar beyond that: it is the session's
    job to decide what the presses mean together.
    '''

    # Button grid, top row first, as laid out on the calculator face.
    BUTTONS = [
        [('7', Digit(7)), ('8', Digit(8)), ('9', Digit(9)),
         ('/', OperatorTap(Operator.DIVIDE))],
        [('4', Digit(4)), ('5', Digit(5)), ('6', Digit(6)),
         ('*', OperatorTap(Operator.MULTIPLY))],
        [('1', Digit(1)), ('2', Digit(2)), ('3', Digit(3)),
         ('-', OperatorTap(Operator.SUBTRACT))],
        [('0', Digit(0)), ('C', Clear()), ('=', Equal()),
         ('+', OperatorTap(Operator.ADD))],
        [('.', Dot()), ('±', Negate())],
    ]

    # Extra keys for buttons that are awkward to type.
    ALIASES = {
        ',': '.',
        '_': '±',
        'c': 'C',
        '\N{MULTIPLICATION SIGN}': '*',
        '\N{DIVISION SIGN}': '/',
    }

    DIGIT = r'\d'
    DOT = r'[.,]'
    NEGATE = r'[_±]'
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      (op.symbol for op in Operator))) + \
               '|[\N{MULTIPLICATION SIGN}\N{DIVISION SIGN}])'
    EQUAL = r'='
    CLEAR = r'[cC]'
    SPACE = r'\s+'

    # All possible keys.
    KEY = r'(?<digit>' + DIGIT + r')|' \
          r'(?<dot>' + DOT + r')|' \
          r'(?<negate>' + NEGATE + r')|' \
          r'(?<operator>' + OPERATOR + r')|' \
          r'(?<equal>' + EQUAL + r')|' \
          r'(?<clear>' + CLEAR + r')|' \
          r'(?<space>' + SPACE + r')'
    # Default regex flags for matching keys
    FLAGS = reduce(operator.__or__,
                   {regex.VERSION1,
                    regex.ASCII},
                   0)

    def __init__(self):
        self.events = {title: event
                       for row in type(self).BUTTONS
                       for title, event in row}
        for alias, title in type(self).ALIASES.items():
            self.events[alias] = self.events[title]
        self.pattern = regex.compile(type(self).KEY, flags=type(self).FLAGS)

    def lex(self, line):
        '''
        Take a line of keystrokes and yield their key matches.

        Skips nothing; stops with an error at the first unknown key.
        '''
        pos = 0
        while pos < len(line):
            match = self.pattern.match(line, pos)
            if match is None:
                raise CalcError("Couldn't lex {0}".format(line[pos:].strip()))
            yield match
            pos = match.end()

    def isfeedable(self, match):
        '''
        Return True if key is a button press, rather than spacing.
        '''
        return match.lastgroup != 'space'

    def event(self, match):
        '''
        Return the input event for a key match.
        '''
        return self.events[match.group(0)]

    def events_from(self, line):
        '''
        Yield input events for a line of keystrokes.
        '''
        for match in self.lex(line):
            if self.isfeedable(match):
                yield self.event(match)
