from .bignumber import *
from .bignumber import __all__ as _core_all
from .field import NumberField
from .helpers import *
from .helpers import __all__ as _helpers_all

__all__ = _core_all + _helpers_all + ('NumberField', )
