# twisty_sim/__main__.py
from twisty_sim.cli import main

main()
