from enum import Enum


class Key(str, Enum):
    F1 = 'F1'
    F2 = 'F2'
    F3 = 'F3'
    F4 = 'F4'
    ARROW_UP = 'ArrowUp'
    ARROW_DOWN = 'ArrowDown'


class Focus(str, Enum):
    """What currently holds keyboard focus when a key is pressed."""

    NONE = 'none'
    TABLE = 'table'
    TEXT_INPUT = 'text_input'
    TEXTAREA = 'textarea'
    SELECT = 'select'
    CHECKBOX = 'checkbox'


INPUT_FOCUS = {Focus.TEXT_INPUT, Focus.TEXTAREA, Focus.SELECT}
FUNCTION_KEYS = {Key.F1, Key.F2, Key.F3, Key.F4}
ARROW_KEYS = {Key.ARROW_UP, Key.ARROW_DOWN}


class KeyOutcome(str, Enum):
    CONSUMED = 'consumed'  # handled, propagation stopped
    PROPAGATE = 'propagate'  # let the form's own handler see it
    IGNORED = 'ignored'
