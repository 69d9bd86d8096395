# conterm

A small library for building nicer command line interfaces: terminal
access, cursor control, keyboard input, styled output and text
measurement that understands ANSI escape codes.

## Installation

```
pip install conterm
```

## Terminal access

`conterm.term.Term` wraps stdout, stderr or a read/write pair. A buffered
terminal collects output until `flush()` is called.

```python
from conterm.term import Term

term = Term.stdout()
term.write_line("Hello World!")
term.hide_cursor()
term.move_cursor_up(1)
term.clear_line()
term.show_cursor()

rows, cols = term.size()          # (24, 80) when the size is unknown
if term.is_term():
    key = term.read_key()
    typed = term.read_line_initial_text("default")
```

Other constructors are `Term.stderr()`, `Term.buffered_stdout()`,
`Term.buffered_stderr()`, `Term.read_write_pair(read, write)` and
`Term.read_write_pair_with_style(read, write, style)`.

Cursor and screen methods: `move_cursor_to`, `move_cursor_up`,
`move_cursor_down`, `move_cursor_left`, `move_cursor_right`, `clear_line`,
`clear_last_lines`, `clear_screen`, `clear_to_end_of_screen`,
`clear_chars`, `show_cursor`, `hide_cursor` and `set_title`. The same
escape sequences are available as plain functions in `conterm.cursor`,
writing to any object with a `write_str` method.

`user_attended()` and `user_attended_stderr()` tell whether stdout or
stderr is connected to a terminal. `term.features()` gives access to
`is_attended()`, `colors_supported()`, `is_msys_tty()`, `wants_emoji()`
and `family()`.

When the terminal is not user attended, `read_key()` returns
`Key.UNKNOWN`, `read_line()` and `read_secure_line()` return an empty
string, and `read_char()` raises `OSError`.

## Keyboard input

Keys come back as members of `conterm.keys.Key` (such as `Key.ENTER`,
`Key.ARROW_UP`, `Key.CTRL_C`), as `Char` for a typed character, or as
`UnknownEscSeq` for an escape sequence that was not recognised.
`read_key_raw()` reports Ctrl-C as `Key.CTRL_C`; `read_key()` raises
SIGINT instead.

`conterm.platform.decode_key(read_char)` decodes one key from any byte
source, which makes the key decoding usable without a real terminal.

## Colors and styles

```python
from conterm.style import Emoji, Style, style

print(f"This is {style('quite').cyan()} neat")

cyan = Style().cyan()
print(f"This is {cyan.apply_to('quite')} neat")

warning = Style.from_dotted_str("red.on_blue.bold")
print(warning.apply_to("careful"))

print(f"{Emoji('✨', ':-)')} Done!")
```

Colors are enabled automatically when the stream is a colour terminal,
honouring `CLICOLOR`, `CLICOLOR_FORCE` and `NO_COLOR`. Override with
`set_colors_enabled()` and `set_colors_enabled_stderr()`, or per value
with `force_styling(True)`.

## Working with ANSI codes

```python
from conterm.ansi import AnsiCodeIterator, strip_ansi_codes
from conterm.text import Alignment, measure_text_width, pad_str, truncate_str

plain = strip_ansi_codes("\x1b[31mred\x1b[0m")          # "red"
width = measure_text_width("\x1b[31m🐶 <3\x1b[0m")      # 5
short = truncate_str("foo bar baz", 10, "...")           # "foo bar..."
padded = pad_str("foo", 7, Alignment.CENTER, None)       # "  foo  "

for text, is_ansi in AnsiCodeIterator("Hello \x1b[31mWorld\x1b[0m!"):
    ...
```

Truncation and padding keep escape codes intact and measure wide
characters by their display width.

## Limitations

- Only POSIX systems are supported: terminal detection and keyboard input
  rely on `termios`. There is no Windows console support, so
  `is_msys_tty()` is always false and `family()` never reports
  `TermFamily.WINDOWS_CONSOLE`.
- This is a library only; it installs no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```