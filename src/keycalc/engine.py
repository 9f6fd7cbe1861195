'''
Infix expression engine: shunting-yard to postfix, then a stack machine.
'''

from collections import deque
import math
import operator

from .tokens import Number, Operator, OperatorSymbol
from .util import (DivisionByZero, InvalidTokenSequence, NotEnoughOperands,
                   TooLargeNumber)


def _divide(left, right):
    if right == 0:
        raise DivisionByZero()
    return operator.__truediv__(left, right)


class Engine:
    '''
    Evaluate token sequences of numbers and left-associative binary operators.

    Holds no state: one instance can serve any number of sessions.
    '''

    OPERATIONS = {
        Operator.ADD: operator.__add__,
        Operator.SUBTRACT: operator.__sub__,
        Operator.MULTIPLY: operator.__mul__,
        Operator.DIVIDE: _divide,
    }

    def evaluate(self, tokens):
        '''
        Evaluate infix tokens.

        Returns None for no tokens at all, the (finite) value otherwise.
        Raises a MathError on anything it cannot compute.
        '''
        return self.evalpostfix(self.topostfix(tokens))

    def topostfix(self, tokens):
        '''
        Reorder infix tokens into postfix (shunting-yard).

        Equal precedence pops, hence left-associativity.
        '''
        output = []
        stack = []
        previous = None
        for token in tokens:
            if isinstance(token, Number):
                output.append(token)
            elif isinstance(token, OperatorSymbol):
                # Operators only ever follow a number.
                if not isinstance(previous, Number):
                    raise InvalidTokenSequence()
                incoming = token.operator
                while stack and stack[-1].precedence >= incoming.precedence:
                    output.append(OperatorSymbol(stack.pop()))
                stack.append(incoming)
            else:
                raise TypeError('Not a token: {!r}'.format(token))
            previous = token
        while stack:
            output.append(OperatorSymbol(stack.pop()))
        return output

    def evalpostfix(self, tokens):
        '''
        Run postfix tokens on an operand stack.
        '''
        stack = deque()
        for token in tokens:
            if isinstance(token, Number):
                stack.append(self._finite(token.value))
            elif isinstance(token, OperatorSymbol):
                # Right operand was pushed last, so comes off first.
                right, left = self._popstack(stack, 2)
                f = type(self).OPERATIONS[token.operator]
                stack.append(self._finite(f(left, right)))
            else:
                raise TypeError('Not a token: {!r}'.format(token))
        if not tokens:
            return None
        if len(stack) != 1:
            raise InvalidTokenSequence()
        return stack[0]

    def _popstack(self, stack, n):
        '''
        Pop n operands, topmost first.
        '''
        if len(stack) < n:
            raise NotEnoughOperands()
        return [stack.pop() for _ in range(n)]

    def _finite(self, value):
        value = float(value)
        if not math.isfinite(value):
            raise TooLargeNumber(value)
        return value
