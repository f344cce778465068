# modal_pad/__init__.py

__version__ = "0.1.0"

from .buffer import TextBuffer
from .commands import CommandResult, execute_command, parse_command
from .config import deep_merge, load_config
from .editor import Editor, main
from .modes import KeyDispatcher
from .render import Frame, build_frame
from .state import EditorState, Mode

# Optional: Expose key components through package level imports
__all__ = [
    'TextBuffer',
    'EditorState',
    'Mode',
    'KeyDispatcher',
    'CommandResult',
    'parse_command',
    'execute_command',
    'Frame',
    'build_frame',
    'Editor',
    'deep_merge',
    'load_config',
    'main'
]
