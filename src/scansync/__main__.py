"""
scansync CLI entry point.

Usage:
    python -m scansync poll --host 10.0.0.5 --serial I2J5678
    python -m scansync fleet instruments.json
"""

from scansync.cli import main

if __name__ == "__main__":
    main()
