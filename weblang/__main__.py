"""
Lets you say `python -m weblang program.wl` with the same effect as `weblang program.wl`.
"""
from .cmdline import main

main()
