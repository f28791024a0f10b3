#
# A text-field editing adapter for BigNumber values.
#

import logging

from .bignumber import BigNumber, MIN_VALUE, try_parse

logger = logging.getLogger(__name__)


def field_text(value):
    '''Return the text an editing field shows for value: the base to two decimals, followed
    by the exponent if it is non-zero.'''
    if value.exponent > 0:
        return f'{value.base:.2f}e{value.exponent}'
    return f'{value.base:.2f}'


class NumberField:
    '''Binds a BigNumber to an editable line of text.

    The field shows its committed value formatted by field_text().  Edited text is parsed
    and, if valid, committed.  Invalid text stays displayed as pending so the user can
    correct it; the committed value is left untouched.
    '''

    __slots__ = ('value', 'pending')

    def __init__(self, value=MIN_VALUE):
        if not isinstance(value, BigNumber):
            raise TypeError('value must be a BigNumber')
        self.value = value
        self.pending = None

    @property
    def text(self):
        '''The text currently displayed.'''
        if self.pending is not None:
            return self.pending
        return field_text(self.value)

    def edit(self, text):
        '''Apply text typed by the user.  Return True if a new value was committed.'''
        if not isinstance(text, str):
            raise TypeError('text must be a string')
        if text == self.text:
            return False

        value = try_parse(text)
        if value is None:
            logger.debug(f'Rejected field text {text!r}; keeping {self.value!r}')
            self.pending = text
            return False

        self.value = value
        self.pending = None
        return True

    def set_value(self, value):
        '''Commit value programmatically, discarding any pending text.'''
        if not isinstance(value, BigNumber):
            raise TypeError('value must be a BigNumber')
        self.value = value
        self.pending = None

    def revert(self):
        '''Discard pending text so the committed value is displayed again.'''
        self.pending = None

    def is_pending(self):
        return self.pending is not None

    def __repr__(self):
        return f'<NumberField value={self.value!r} pending={self.pending!r}>'
