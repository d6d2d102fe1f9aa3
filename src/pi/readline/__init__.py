"""pi-readline: single-line Emacs-style editor with async tab completion."""

# Completion
from pi.readline.completion import (
    CompleteFn,
    CompletionRequest,
    CompletionResponse,
    WordListCompleter,
)

# Key translation
from pi.readline.keys import KeyEvent, parse_terminal_key, translate_key

# Terminal component
from pi.readline.line_input import LineInput

# Completion popup
from pi.readline.popup import (
    CompletePopup,
    PopupContainer,
    PopupMetrics,
    ScreenGeometry,
    TextMeasurer,
)

# Line editor
from pi.readline.readline import EditBuffer, ReadLine, ReadLineOptions

# Geometry
from pi.readline.types import PopupPlacement, Rect, TextSize

# Text helpers
from pi.readline.utils import (
    backward_word_boundary,
    completion_overlap,
    longest_shared_prefix_length,
    measure_text,
    visible_width,
)

__all__ = [
    # Completion
    "CompleteFn",
    "CompletionRequest",
    "CompletionResponse",
    "WordListCompleter",
    # Keys
    "KeyEvent",
    "parse_terminal_key",
    "translate_key",
    # Components
    "LineInput",
    # Popup
    "CompletePopup",
    "PopupContainer",
    "PopupMetrics",
    "ScreenGeometry",
    "TextMeasurer",
    # Line editor
    "EditBuffer",
    "ReadLine",
    "ReadLineOptions",
    # Geometry
    "PopupPlacement",
    "Rect",
    "TextSize",
    # Text helpers
    "backward_word_boundary",
    "completion_overlap",
    "longest_shared_prefix_length",
    "measure_text",
    "visible_width",
]
