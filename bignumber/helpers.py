#
# Aggregation helpers for BigNumber values.
#

__all__ = ('big_max', 'big_min', 'clamp')


def big_max(a, b):
    '''Return the larger of two BigNumbers; a if they are equal.'''
    return a if a >= b else b


def big_min(a, b):
    '''Return the smaller of two BigNumbers; a if they are equal.'''
    return a if a <= b else b


def clamp(value, lo, hi):
    '''Return value limited to the inclusive range [lo, hi].  No new value is constructed.'''
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value
