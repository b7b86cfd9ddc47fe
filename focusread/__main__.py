"""Package entry point for ``python -m focusread``.

WHY: Users run the reader as ``python -m focusread read book.pdf`` for the
terminal player, or ``python -m focusread --gui`` for the desktop window.

HOW: Checks sys.argv for the ``--gui`` flag. If present, launches the
Tkinter GUI. Otherwise, delegates to the CLI's main() function.

RULES:
- ``--gui`` flag launches the Tkinter GUI
- Without ``--gui``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--gui" in sys.argv:
        from focusread.gui import main as gui_main
        gui_main()
    else:
        from focusread.cli import main
        main()
