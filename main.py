# main.py
from __future__ import annotations

from twisty_sim.cli import main


if __name__ == "__main__":
    main()
