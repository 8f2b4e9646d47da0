#!/usr/bin/env python3
"""

Usage:
    python Main.py --url https://example.com/ [--align]

Or
    python -m server_date --url https://example.com/ [--align]
"""

from server_date.__main__ import main

if __name__ == "__main__":
    main()
