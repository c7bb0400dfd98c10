#!/usr/bin/env python3
"""FocusKey entry point.

Run with:
    python main.py https://focuskey.app/toggle
    python -m focuskey https://focuskey.app/toggle
"""

from focuskey.__main__ import main


if __name__ == "__main__":
    main()
