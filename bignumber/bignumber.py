#
# A bounded scientific-notation number: a single-precision significand scaled by an
# unsigned 32-bit power of ten.
#
# (c) Neil Booth 2007-2021.  All rights reserved.
#

import copy
import re
import threading
from collections import namedtuple
from decimal import (Decimal, Context as DecimalContext, ROUND_HALF_EVEN, ROUND_HALF_UP,
                     MAX_EMAX, MIN_EMIN)
from enum import IntFlag, IntEnum
from math import isfinite, log10
from struct import Struct

import attr

__all__ = ('Context', 'DefaultContext', 'get_context', 'set_context', 'local_context',
           'Flags', 'Compare', 'HandlerKind', 'TextFormat', 'DefaultTextFormat',
           'BigNumber', 'BigNumberError', 'ExceededLimit', 'DivideByZero', 'BelowFloor',
           'ParseFailure', 'Saturated', 'Negligible',
           'add', 'subtract', 'multiply', 'divide', 'scale', 'unscale', 'compare',
           'parse', 'try_parse', 'to_string',
           'EXPONENT_MAX', 'SIGNIFICANCE_THRESHOLD', 'TYPE_LIMIT', 'MIN_VALUE', 'MAX_VALUE',
           'OP_CONSTRUCT', 'OP_ADD', 'OP_SUBTRACT', 'OP_MULTIPLY', 'OP_DIVIDE',
           'OP_SCALE', 'OP_UNSCALE', 'OP_FROM_INT', 'OP_FROM_FLOAT', 'OP_FROM_STRING')


# The largest exponent; exponents are unsigned 32-bit integers
EXPONENT_MAX = 0xffffffff

# Exponent gap beyond which addition and subtraction ignore the smaller operand
SIGNIFICANCE_THRESHOLD = 16

# The highest value a BigNumber can have, as text
TYPE_LIMIT = '9.999e+4294967295'


# Operation names
OP_CONSTRUCT = 'construct'
OP_ADD = 'add'
OP_SUBTRACT = 'subtract'
OP_MULTIPLY = 'multiply'
OP_DIVIDE = 'divide'
OP_SCALE = 'scale'
OP_UNSCALE = 'unscale'
OP_FROM_INT = 'from_int'
OP_FROM_FLOAT = 'from_float'
OP_FROM_STRING = 'from_string'


# Three-way result of the compare() operation.  Every pair of values is ordered.
class Compare(IntEnum):
    LESS_THAN = 0
    EQUAL = 1
    GREATER_THAN = 2


# Operation status flags.
class Flags(IntFlag):
    EXCEEDED_LIMIT = 0x01
    DIV_BY_ZERO    = 0x02
    BELOW_FLOOR    = 0x04
    PARSE_FAILURE  = 0x08
    SATURATED      = 0x10
    NEGLIGIBLE     = 0x20


pack_single = Struct('=f').pack
unpack_single = Struct('=f').unpack
log10_2 = log10(2)

SIGNIFICAND_REGEX = re.compile(
    # plus[opt]
    '\\+?('
    # integer with thousands groups, then an optional fraction
    '[0-9]{1,3}(,[0-9]{3})+(\\.[0-9]*)?'
    # or integer.[opt]fraction[opt]
    '|[0-9]+\\.?[0-9]*'
    # or .fraction
    '|\\.[0-9]+)$',
    re.ASCII
)
EXPONENT_REGEX = re.compile('\\+?([0-9]+)$', re.ASCII)


def decimal_context(precision, rounding=ROUND_HALF_EVEN):
    '''Return a decimal context with the given precision and unbounded exponents.  Results
    never depend on the caller's decimal context.'''
    return DecimalContext(prec=precision, rounding=rounding, Emin=MIN_EMIN, Emax=MAX_EMAX)


# Intermediate products and quotients of scale() and unscale(), and significands read by
# parse(); far wider than a single-precision base needs
exact_context = decimal_context(40)


@attr.s(slots=True, kw_only=True, eq=False)
class TextFormat:
    '''Controls the conversion of a BigNumber to a string.'''

    # Values with an exponent up to and including this one are written out in full as
    # an integer, for example "1500".  Larger exponents use scientific notation, for
    # example "2.34e10".
    expand_max_exponent = attr.ib(default=3)
    # Digits after the decimal point of the significand in scientific notation.
    decimals = attr.ib(default=2)
    # Separator between groups of three digits of a written-out integer.  The empty
    # string disables grouping.
    thousands_sep = attr.ib(default=',')
    # Written-out integers with fewer digits than this are not grouped.
    min_grouping_digits = attr.ib(default=5)
    # If True, the exponent character is an upper case 'E'.
    upper_case = attr.ib(default=False)

    def group_digits(self, digits):
        '''Return a string of decimal digits with thousands separators inserted.'''
        if not self.thousands_sep or len(digits) < self.min_grouping_digits:
            return digits
        head = len(digits) % 3 or 3
        groups = [digits[:head]]
        groups.extend(digits[n: n + 3] for n in range(head, len(digits), 3))
        return self.thousands_sep.join(groups)

    def format_expanded(self, value):
        '''Return the value written out in full, rounded half away from zero to an integer.'''
        base = Decimal(value.base)
        # Wide enough for every digit of the base and of the integer result
        context = decimal_context(max(len(base.as_tuple().digits), value.exponent + 2),
                                  ROUND_HALF_UP)
        exact = base.scaleb(value.exponent, context)
        digits = str(exact.quantize(Decimal(1), context=context))
        return self.group_digits(digits)

    def format_scientific(self, value):
        '''Return the value in scientific notation with a fixed number of decimals.'''
        # The base is below 10, though rounding can carry it to 10
        context = decimal_context(self.decimals + 2, ROUND_HALF_UP)
        quantum = Decimal((0, (1, ), -self.decimals))
        significand = Decimal(value.base).quantize(quantum, context=context)
        marker = 'E' if self.upper_case else 'e'
        return f'{significand}{marker}{value.exponent}'

    def format(self, value):
        if value.exponent <= self.expand_max_exponent:
            return self.format_expanded(value)
        return self.format_scientific(value)


# Default format for str() and to_string()
DefaultTextFormat = TextFormat()


#
# Signals
#

class BigNumberError(ArithmeticError):
    '''All exceptions signalled by this module subclass from this.

    BigNumberError expects two arguments:

         def __init__(self, op_tuple, result):

    op_tuple is a tuple of the operation name and operands causing the signal.  result is
    the value that default exception handling should deliver.

    Exceptions derived from BigNumberError must have a linear inheritance from it and
    through the first base class if an exception has multiple base classes.
    '''

    flag_to_raise = 'Nope! Fix your bug.'
    message = 'BigNumber error'

    @property
    def op_tuple(self):
        return self.args[0]

    @property
    def default_result(self):
        return self.args[1]

    def __str__(self):
        return f'{self.message} ({self.op_tuple[0]})'

    def signal(self, context=None):
        '''Call to signal an exception.  This routine handles the exception according to
        default or alternative exception handling as specified in the context.'''
        context = context or get_context()
        kind, handler = context.handler(self.__class__)
        result = self.default_result

        if kind != HandlerKind.NO_FLAG:
            context.flags |= self.flag_to_raise
            if kind == HandlerKind.RECORD_EXCEPTION:
                context.exceptions.append(self)

        if kind == HandlerKind.RAISE:
            raise self
        if kind == HandlerKind.SUBSTITUTE_VALUE:
            result = handler(self, context)

        return result


class ExceededLimit(BigNumberError, OverflowError):
    '''Signalled when normalization needs an exponent above EXPONENT_MAX.  The default result
    is MAX_VALUE.'''

    flag_to_raise = Flags.EXCEEDED_LIMIT
    message = f'exceeded BigNumber type limit {TYPE_LIMIT}'


class DivideByZero(BigNumberError, ZeroDivisionError):
    '''A divide operation with a zero divisor.  The default result is MAX_VALUE.'''

    flag_to_raise = Flags.DIV_BY_ZERO
    message = 'division by zero'


class BelowFloor(BigNumberError):
    '''Signalled by division when the dividend's exponent is smaller than the divisor's, so
    the quotient would lie below MIN_VALUE.  The default result is MIN_VALUE.'''

    flag_to_raise = Flags.BELOW_FLOOR
    message = 'number is smaller than 1'


class ParseFailure(BigNumberError, ValueError):
    '''Signalled when a string is not a valid BigNumber.  The default result is None.'''

    flag_to_raise = Flags.PARSE_FAILURE
    message = 'invalid BigNumber string'

    def __str__(self):
        return f'{self.message}: {self.op_tuple[1]!r}'


class Saturated(BigNumberError):
    '''Signalled when a subtraction would fall below MIN_VALUE.  The default result is
    MIN_VALUE.'''

    flag_to_raise = Flags.SATURATED
    message = 'subtraction saturated at 1'


class Negligible(BigNumberError):
    '''Signalled when an addition or subtraction drops an operand whose exponent is more than
    the significance threshold below the other's.  The default result is the other
    operand.'''

    flag_to_raise = Flags.NEGLIGIBLE
    message = 'operand below significance threshold'


# Alternate exception handling

class HandlerKind(IntEnum):
    '''Indicates how a signalled exception should be handled.'''
    # Default exception handling.  This returns the default value and raises the flag.
    DEFAULT = 0

    # Default exception handling without raising the associated flag
    NO_FLAG = 1

    # Default exception handling but also record the exception in the context
    RECORD_EXCEPTION = 2

    # Default exception handling but substitute a value for the default result.  A handler
    # must be provided with signature
    #
    #    def handler(exception, context):
    #
    # The value returned by the handler will become the operation's result.
    SUBSTITUTE_VALUE = 3

    # Raise the exception immediately
    RAISE = 4

    def requires_handler(self):
        return self == HandlerKind.SUBSTITUTE_VALUE


class Context:
    '''The execution context for operations.  Carries the significance threshold, status
    flags and exception handlers.'''

    __slots__ = ('significance', 'flags', 'handlers', 'exceptions')

    def __init__(self, *, significance=SIGNIFICANCE_THRESHOLD, flags=0):
        '''significance is the exponent gap beyond which addition and subtraction drop the
        smaller operand.  flags represents the initially raised flags.
        '''
        if not isinstance(significance, int):
            raise TypeError('significance must be an integer')
        if significance < 0:
            raise ValueError('significance cannot be negative')
        self.significance = significance
        self.flags = flags
        self.handlers = {}
        self.exceptions = []

    def copy(self):
        '''Return a (deep) copy of the context.'''
        # A deep copy is needed because handlers and exceptions are mutable containers
        return copy.deepcopy(self)

    def set_handler(self, exc_classes, kind, handler=None):
        classes = (exc_classes, ) if not isinstance(exc_classes, (tuple, list)) else exc_classes
        if not all(issubclass(exc_class, BigNumberError) for exc_class in classes):
            raise TypeError('all exception classes must be subclasses of BigNumberError')
        if not isinstance(kind, HandlerKind):
            raise TypeError('kind must be a HandlerKind instance')
        if (handler is not None) ^ kind.requires_handler():
            if handler is None:
                raise ValueError(f'handler not given for kind {kind!r}')
            else:
                raise ValueError(f'handler given for kind {kind!r}')
        pair = (kind, handler)
        for exc_class in classes:
            self.handlers[exc_class] = pair

    def handler(self, exc_class):
        '''Return a (handler_kind, callback) pair for a signal class.'''
        if not issubclass(exc_class, BigNumberError):
            raise TypeError('exc_class must be a subclass of BigNumberError')

        for cls in exc_class.mro():
            handler = self.handlers.get(cls)
            if handler:
                return handler

        return HandlerKind.DEFAULT, None

    def __repr__(self):
        return f'<Context significance={self.significance} flags={self.flags!r}>'


def to_single(value):
    '''Return a Python float rounded to IEEE single precision.'''
    return unpack_single(pack_single(value))[0]


def _normalize(base, exponent, op_tuple, context):
    '''Return base * 10^exponent as a BigNumber, rescaling the pair to canonical range.

    The exponent may be any non-negative integer here; one that remains above EXPONENT_MAX
    after rescaling signals ExceededLimit.
    '''
    if base == 0:
        return _zero
    if not isfinite(base):
        return ExceededLimit(op_tuple, MAX_VALUE).signal(context)

    while True:
        while base >= 10:
            base /= 10
            exponent += 1
        # Sub-unity significands are kept at exponents 0 and 1
        while 0 < base < 1 and exponent > 1:
            base *= 10
            exponent -= 1
        base = to_single(base)
        # Rounding to single precision can carry 9.99999999 up to 10
        if base < 10:
            break

    if base == 0:
        return _zero
    if exponent > EXPONENT_MAX:
        return ExceededLimit(op_tuple, MAX_VALUE).signal(context)
    return BigNumber._make((base, exponent))


def _normalize_int(value, exponent, op_tuple, context):
    '''Return value * 10^exponent for a non-negative integer value.  Integers too wide for a
    float are scaled exactly.'''
    if value < 1 << 53:
        return _normalize(float(value), exponent, op_tuple, context)
    # Estimate the decimal digit count, then correct it
    shift = int((value.bit_length() - 1) * log10_2)
    while 10 ** (shift + 1) <= value:
        shift += 1
    while 10 ** shift > value:
        shift -= 1
    return _normalize(value / 10 ** shift, exponent + shift, op_tuple, context)


def _normalize_decimal(value, exponent, op_tuple, context):
    '''Return value * 10^exponent for a non-negative Decimal value.  The magnitude of value
    moves into the exponent so the base can neither overflow nor underflow a float.'''
    if not value:
        return _zero
    # Sub-unity bases are only shifted down as far as exponent 1
    shift = max(value.adjusted(), min(0, 1 - exponent))
    base = float(value.scaleb(-shift, exact_context))
    return _normalize(base, exponent + shift, op_tuple, context)


class BigNumber(namedtuple('BigNumber', 'base exponent')):
    '''A number base * 10^exponent.

    base is held to IEEE single precision and exponent is an unsigned 32-bit integer.
    Every value is normalized on construction:

        - an exponent above 1 has a base in [1, 10),
        - an exponent of 0 or 1 allows a base in (0, 10),
        - a zero base has a zero exponent.

    The largest value is just below 10 * 10^EXPONENT_MAX.  Values are immutable; operators
    return new values.
    '''

    __slots__ = ()

    def __new__(cls, base, exponent=0, context=None):
        '''Validate and normalize base * 10^exponent.  Signals ExceededLimit if the exponent
        would exceed EXPONENT_MAX.'''
        if not isinstance(exponent, int):
            raise TypeError('exponent must be an integer')
        if exponent < 0:
            raise ValueError(f'exponent {exponent:,d} cannot be negative')
        op_tuple = (OP_CONSTRUCT, base, exponent)
        if isinstance(base, int):
            if base < 0:
                raise ValueError(f'base {base:,d} cannot be negative')
            return _normalize_int(base, exponent, op_tuple, context)
        if not isinstance(base, float):
            raise TypeError('base must be an int or float')
        if not isfinite(base) or base < 0:
            raise ValueError(f'base {base!r} must be finite and non-negative')
        return _normalize(base, exponent, op_tuple, context)

    _converters = {}

    @classmethod
    def from_value(cls, value, context=None):
        '''Return a BigNumber derived from value.  Values of type int, float and string are
        accepted, and passed on to from_int, from_float and from_string respectively.'''
        converter = cls._converters.get(type(value))
        if not converter:
            raise TypeError(f'from_value cannot convert values of type {type(value)}')
        return converter(value, context)

    @classmethod
    def from_int(cls, value, context=None):
        '''Return the integer value as a BigNumber with exponent 0, normalized.'''
        if not isinstance(value, int):
            raise TypeError('from_int requires an integer')
        if value < 0:
            raise ValueError(f'cannot convert negative integer {value:,d}')
        return _normalize_int(value, 0, (OP_FROM_INT, value), context)

    @classmethod
    def from_float(cls, value, context=None):
        '''Return the float value as a BigNumber with exponent 0, normalized.'''
        if not isinstance(value, float):
            raise TypeError('from_float requires a float')
        if not isfinite(value) or value < 0:
            raise ValueError(f'cannot convert {value!r}')
        return _normalize(value, 0, (OP_FROM_FLOAT, value), context)

    @classmethod
    def from_string(cls, string, context=None):
        '''Convert a string to a BigNumber.  See parse().'''
        return parse(string, context)

    @classmethod
    def _from_self(cls, value, context=None):
        return value

    ##
    ## Non-computational operations
    ##

    def is_zero(self):
        '''Return True if the base is zero.'''
        return self.base == 0

    def is_normal(self):
        '''Return True if the base lies in [1, 10).'''
        return 1 <= self.base < 10

    def to_string(self, text_format=None):
        return to_string(self, text_format)

    ##
    ## Python support - make it feel like a Python numeric data type.
    ##

    def __str__(self):
        return to_string(self)

    def __eq__(self, other):
        if not isinstance(other, BigNumber):
            return False
        return compare(self, other) == Compare.EQUAL

    def __ne__(self, other):
        if not isinstance(other, BigNumber):
            return True
        return compare(self, other) != Compare.EQUAL

    def __lt__(self, other):
        if not isinstance(other, BigNumber):
            return _unordered(self, other, '<')
        return compare(self, other) == Compare.LESS_THAN

    def __le__(self, other):
        if not isinstance(other, BigNumber):
            return _unordered(self, other, '<=')
        return compare(self, other) in (Compare.EQUAL, Compare.LESS_THAN)

    def __ge__(self, other):
        if not isinstance(other, BigNumber):
            return _unordered(self, other, '>=')
        return compare(self, other) in (Compare.EQUAL, Compare.GREATER_THAN)

    def __gt__(self, other):
        if not isinstance(other, BigNumber):
            return _unordered(self, other, '>')
        return compare(self, other) == Compare.GREATER_THAN

    def __hash__(self):
        return hash((BigNumber, self.base, self.exponent))

    def __bool__(self):
        return not self.is_zero()

    def __float__(self):
        '''Return the value as a Python float; infinity if it is out of range.'''
        if self.exponent > 308:
            return float('inf')
        return self.base * 10.0 ** self.exponent

    def __add__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return add(self, other)

    def __sub__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return subtract(self, other)

    def __mul__(self, other):
        if isinstance(other, BigNumber):
            return multiply(self, other)
        if isinstance(other, (int, float)):
            return scale(self, other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, BigNumber):
            return divide(self, other)
        if isinstance(other, (int, float)):
            return unscale(self, other)
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __rsub__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return subtract(other, self)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __rtruediv__(self, other):
        other = convert_for_arith(other)
        if other is None:
            return NotImplemented
        return divide(other, self)


BigNumber._converters = {
    int: BigNumber.from_int,
    float: BigNumber.from_float,
    str: BigNumber.from_string,
    BigNumber: BigNumber._from_self,
}


def _unordered(lhs, rhs, op):
    # A plain tuple would otherwise be ordered against the raw fields
    if isinstance(rhs, tuple):
        raise TypeError(f"'{op}' not supported between instances of "
                        f"'{type(lhs).__name__}' and '{type(rhs).__name__}'")
    return NotImplemented


def convert_for_arith(value):
    '''Convert value to something capable of doing arithmetic with a BigNumber.

    BigNumber values are returned unmodified.  Python ints and floats are converted with
    exponent 0.  Otherwise None is returned.
    '''
    if isinstance(value, BigNumber):
        return value
    if isinstance(value, int):
        return BigNumber.from_int(value)
    if isinstance(value, float):
        return BigNumber.from_float(value)
    return None


##
## General computational operations
##

def add(lhs, rhs, context=None):
    '''Return the sum LHS + RHS.

    If the exponents differ by more than the context's significance threshold the operand
    with the smaller exponent is dropped and Negligible is signalled.
    '''
    context = context or get_context()
    op_tuple = (OP_ADD, lhs, rhs)

    # How far the RHS significand must be shifted right to align with the LHS
    shift = lhs.exponent - rhs.exponent
    if abs(shift) > context.significance:
        return Negligible(op_tuple, lhs if shift > 0 else rhs).signal(context)

    if shift >= 0:
        base = lhs.base + rhs.base / 10.0 ** shift
        exponent = lhs.exponent
    else:
        base = lhs.base / 10.0 ** -shift + rhs.base
        exponent = rhs.exponent

    return _normalize(base, exponent, op_tuple, context)


def subtract(lhs, rhs, context=None):
    '''Return the difference LHS - RHS.  Differences that are not above MIN_VALUE saturate
    to it, signalling Saturated.'''
    context = context or get_context()
    op_tuple = (OP_SUBTRACT, lhs, rhs)

    if compare(lhs, rhs) != Compare.GREATER_THAN:
        return Saturated(op_tuple, MIN_VALUE).signal(context)

    # LHS is the larger so its exponent is at least that of the RHS
    shift = lhs.exponent - rhs.exponent
    if shift > context.significance:
        return Negligible(op_tuple, lhs).signal(context)

    base = lhs.base - rhs.base / 10.0 ** shift
    # Possible when the LHS has a sub-unity base at exponent 1
    if base <= 0:
        return Saturated(op_tuple, MIN_VALUE).signal(context)

    result = _normalize(base, lhs.exponent, op_tuple, context)
    # Sub-unity bases at exponent 1 order above MIN_VALUE, so test the magnitude
    if float(result) < 1:
        return Saturated(op_tuple, MIN_VALUE).signal(context)
    return result


def multiply(lhs, rhs, context=None):
    '''Returns the product of LHS and RHS.  The exponents are added without wrapping; a sum
    that cannot be normalized below EXPONENT_MAX signals ExceededLimit.'''
    context = context or get_context()
    op_tuple = (OP_MULTIPLY, lhs, rhs)
    return _normalize(lhs.base * rhs.base, lhs.exponent + rhs.exponent, op_tuple, context)


def divide(lhs, rhs, context=None):
    '''Returns the quotient of LHS and RHS.

    Signals DivideByZero if the RHS base is zero, and BelowFloor if the RHS exponent is
    greater than that of the LHS.
    '''
    context = context or get_context()
    op_tuple = (OP_DIVIDE, lhs, rhs)

    if rhs.base == 0:
        return DivideByZero(op_tuple, MAX_VALUE).signal(context)
    if lhs.exponent < rhs.exponent:
        return BelowFloor(op_tuple, MIN_VALUE).signal(context)

    return _normalize(lhs.base / rhs.base, lhs.exponent - rhs.exponent, op_tuple, context)


def _check_factor(factor):
    if not isinstance(factor, (int, float)):
        raise TypeError('factor must be an int or float')
    # Integers of any width are finite
    if isinstance(factor, float) and not isfinite(factor):
        raise ValueError(f'factor {factor!r} must be finite')
    if factor < 0:
        raise ValueError(f'factor {factor!r} cannot be negative')


def scale(value, factor, context=None):
    '''Return the value with its base multiplied by a plain number; the exponent is kept.

    The product is formed exactly, so factors beyond the float range (or an int of any
    width) move their magnitude into the exponent.  Only the limit check can fail.
    '''
    _check_factor(factor)
    op_tuple = (OP_SCALE, value, factor)
    product = exact_context.multiply(Decimal(value.base), Decimal(factor))
    return _normalize_decimal(product, value.exponent, op_tuple, context)


def unscale(value, divisor, context=None):
    '''Return the value with its base divided by a plain number; the exponent is kept.
    Signals DivideByZero if divisor is zero.'''
    _check_factor(divisor)
    op_tuple = (OP_UNSCALE, value, divisor)
    if divisor == 0:
        return DivideByZero(op_tuple, MAX_VALUE).signal(context)
    quotient = exact_context.divide(Decimal(value.base), Decimal(divisor))
    return _normalize_decimal(quotient, value.exponent, op_tuple, context)


def compare(lhs, rhs):
    '''Return the ordering of LHS and RHS.  The exponent decides; the bases are compared only
    when the exponents are equal.'''
    if lhs.exponent != rhs.exponent:
        if lhs.exponent > rhs.exponent:
            return Compare.GREATER_THAN
        return Compare.LESS_THAN
    if lhs.base == rhs.base:
        return Compare.EQUAL
    if lhs.base > rhs.base:
        return Compare.GREATER_THAN
    return Compare.LESS_THAN


def parse(string, context=None):
    '''Convert a string to a BigNumber.

    The accepted syntax is a significand, optionally followed by 'e' or 'E' and an unsigned
    integer exponent.  Leading and trailing whitespace is ignored.  A negative significand
    or exponent, or any other malformed text, signals ParseFailure.  The result is
    normalized so may also signal ExceededLimit.
    '''
    if not isinstance(string, str):
        raise TypeError('parse requires a string')

    context = context or get_context()
    op_tuple = (OP_FROM_STRING, string)

    text = string.strip().lower()
    # Negative values are not allowed
    if not text or text[0] == '-':
        return ParseFailure(op_tuple, None).signal(context)

    sig_str, marker, exp_str = text.partition('e')
    if SIGNIFICAND_REGEX.match(sig_str) is None:
        return ParseFailure(op_tuple, None).signal(context)

    exponent = 0
    if marker:
        # This also rejects negative exponents
        match = EXPONENT_REGEX.match(exp_str)
        if match is None:
            return ParseFailure(op_tuple, None).signal(context)
        exp_digits = match.group(1).lstrip('0') or '0'
        if len(exp_digits) > 10 or int(exp_digits) > EXPONENT_MAX:
            return ParseFailure(op_tuple, None).signal(context)
        exponent = int(exp_digits)

    # Read the significand exactly; wide integer parts move into the exponent so that
    # they cannot overflow a float
    significand = Decimal(sig_str.lstrip('+').replace(',', ''))
    return _normalize_decimal(significand, exponent, op_tuple, context)


def try_parse(string):
    '''Like parse() but return None instead of signalling on any failure.  The current
    context is not touched.'''
    context = Context()
    context.set_handler(BigNumberError, HandlerKind.RAISE)
    try:
        return parse(string, context)
    except BigNumberError:
        return None


def to_string(value, text_format=None):
    '''Return value as text.  See TextFormat for output control.'''
    text_format = text_format or DefaultTextFormat
    return text_format.format(value)


#
# Exported functions
#

DefaultContext = Context()
DefaultContext.set_handler((ExceededLimit, DivideByZero, BelowFloor, ParseFailure),
                           HandlerKind.RAISE)

tls = threading.local()


def get_context():
    try:
        return tls.context
    except AttributeError:
        tls.context = DefaultContext.copy()
        return tls.context


def set_context(context):
    '''Sets the current thread's context to context (not a copy of it).'''
    tls.context = context


class LocalContext:
    '''A context manager that will set the current context for the active thread to a copy of
    context on entry to the with-statement and restore the previous context on exit.  If
    no context is specified a copy of the current context is taken instead.
    '''

    def __init__(self, context=None):
        self.saved_context = None
        self.context_to_set = context

    def __enter__(self):
        self.saved_context = get_context()
        context = (self.context_to_set or self.saved_context).copy()
        set_context(context)
        return context

    def __exit__(self, etype, value, traceback):
        set_context(self.saved_context)


local_context = LocalContext


#
# Constants
#

_zero = BigNumber._make((0.0, 0))
MIN_VALUE = BigNumber._make((1.0, 0))
MAX_VALUE = BigNumber._make((to_single(9.999), EXPONENT_MAX))
