#!/usr/bin/env python3
"""PomoPlayer — entry point.

Run with:
    python main.py
    python -m pomoplayer
"""

from pomoplayer.__main__ import main


if __name__ == "__main__":
    main()
