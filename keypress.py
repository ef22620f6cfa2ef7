"""
Single key press reading for terminal play.
Arrow keys, WASD and vim keys move the tiles, q quits.
"""

import sys
from typing import Optional, Union

from game_2048 import Direction

try:
    import termios
    import tty
except ImportError:
    # Windows console
    import msvcrt
    termios = None


QUIT = 'quit'

KEY_BINDINGS = {
    'up': Direction.UP,
    'down': Direction.DOWN,
    'left': Direction.LEFT,
    'right': Direction.RIGHT,
    'w': Direction.UP,
    's': Direction.DOWN,
    'a': Direction.LEFT,
    'd': Direction.RIGHT,
    'k': Direction.UP,
    'j': Direction.DOWN,
    'h': Direction.LEFT,
    'l': Direction.RIGHT,
    'q': QUIT,
}

# Final byte of the ANSI escape sequence ESC [ X sent by each arrow key
ANSI_ARROWS = {'A': 'up', 'B': 'down', 'C': 'right', 'D': 'left'}

# Second byte after the \xe0 / \x00 prefix on Windows consoles
MSVCRT_ARROWS = {'H': 'up', 'P': 'down', 'M': 'right', 'K': 'left'}


def _read_char(stream) -> str:
    """Read one character, raising EOFError once the input is exhausted."""
    if not stream.isatty():
        # Piped input: no terminal modes to switch
        ch = stream.read(1)
    else:
        fd = stream.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            ch = stream.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    if not ch:
        raise EOFError("end of input")
    return ch


def decode_escape(read_char) -> str:
    """
    Finish decoding a key that started with ESC.

    Args:
        read_char: callable returning the next character from the terminal

    Returns:
        Arrow name ('up', 'down', 'left', 'right') or 'escape'
    """
    if read_char() != '[':
        return 'escape'
    return ANSI_ARROWS.get(read_char(), 'escape')


def read_key(stream=None) -> str:
    """
    Block until one key is pressed and return it.

    Printable keys come back as lowercase characters, arrow keys as their
    names. A terminal is put in cbreak mode only for the duration of the
    read; piped input is read as is.

    Raises:
        EOFError: when the input is exhausted
    """
    if termios is None:
        ch = msvcrt.getwch()
        if ch in ('\xe0', '\x00'):
            return MSVCRT_ARROWS.get(msvcrt.getwch(), 'unknown')
        return ch.lower()

    stream = stream or sys.stdin
    ch = _read_char(stream)
    if ch == '\x1b':
        return decode_escape(lambda: _read_char(stream))
    return ch.lower()


def key_to_command(key: str) -> Optional[Union[Direction, str]]:
    """Translate a key into a Direction, QUIT, or None for unbound keys."""
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


def read_command(stream=None) -> Optional[Union[Direction, str]]:
    return key_to_command(read_key(stream))
