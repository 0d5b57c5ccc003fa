"""
Lets `python -m nought program.0` work just like the `nought` command.
"""
from .cmdline import main

main()
