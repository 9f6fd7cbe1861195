from decimal import Context, Decimal, ROUND_HALF_EVEN
from functools import wraps


class CalcError(Exception):
    pass


class MathError(CalcError):
    '''
    Base of everything that can go wrong evaluating an expression.

    The message (first argument) is what a session shows on its display.
    '''
    MESSAGE = 'Unknown error'

    def __init__(self, *args):
        super().__init__(*(args or (type(self).MESSAGE,)))

    @property
    def message(self):
        return self.args[0]


class DivisionByZero(MathError):
    MESSAGE = 'Division by zero'


class NotEnoughOperands(MathError):
    MESSAGE = 'Too few operands'


class InvalidTokenSequence(MathError):
    MESSAGE = 'Invalid expression'


class TooManyDigits(MathError):
    MESSAGE = 'Too many digits'


class InvalidInput(MathError):
    MESSAGE = 'Invalid input'


class TooLargeNumber(MathError):
    '''
    A number or intermediate result that is not finite.

    Carries the offending value for diagnostics.
    '''
    MESSAGE = 'Number too large'

    def __init__(self, value):
        super().__init__(type(self).MESSAGE, value)
        self.value = value


def wrap_user_errors(fmt):
    '''
    Decorator that converts unexpected exceptions to CalcErrors.

    Passes through CalcErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise CalcError(fmt.format(*args, **kwargs), e)
        return wrapper
    return decorator


# Fractional digits kept on output, like a pocket calculator.
FRACTION_DIGITS = 9
_QUANTUM = Decimal(1).scaleb(-FRACTION_DIGITS)
# Wide enough for the integral part of the largest double.
_CONTEXT = Context(prec=400)


def formatnumber(value):
    '''
    Render number in plain decimal notation.

    No exponent, no grouping, at most FRACTION_DIGITS fractional digits and no
    trailing zeros. Used for both the expression trace and results.
    '''
    # Decimal(float) is exact, so rounding happens once, here.
    text = format(Decimal(value).quantize(_QUANTUM,
                                          rounding=ROUND_HALF_EVEN,
                                          context=_CONTEXT), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        text = '0'
    return text


def countdigits(text):
    '''
    Count digits in numeral, ignoring sign and decimal point.
    '''
    return len(text.replace('.', '').replace('-', ''))
