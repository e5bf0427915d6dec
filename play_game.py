"""
Play the game in command line without installing the package.

    python play_game.py -s 42 -r game.log
    python play_game.py -s 42 -p game.log -d 100
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from slide2048.cli import main

if __name__ == "__main__":
    sys.exit(main())
