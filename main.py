#!/usr/bin/env python3
"""
Pattern Rename Tool - Main Entry

Usage:
    python main.py                                   # Interactive mode
    python main.py match ./dir -i "[Name].txt"       # Show captures
    python main.py pattern ./dir -i "[Name].txt" -o "[Name].md"
    python main.py prefix ./dir -p "ProjectX_"
"""

import sys
from pathlib import Path

# Ensure the current directory is in the Python path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    """Main entry point"""
    from cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
