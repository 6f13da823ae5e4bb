"""
So that `python -m plc program.plc` works the same as the `plc` script.
"""
from .cmdline import main

main()
