# main.py - run the markov chat bot from the terminal

import sys

from markov_chatter.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
