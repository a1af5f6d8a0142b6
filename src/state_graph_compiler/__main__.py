"""
Entry point for the state_graph_compiler package.

This allows the package to be executed as:
    python -m state_graph_compiler [SAVE_DIR]

It compiles the demo state machine, prints it, and writes the definition and
role policy to SAVE_DIR when one is given.
"""

import sys
from colorama import Style, Fore
from .demo_state_machine import main

if __name__ == "__main__":
    try:
        save_dir = sys.argv[1] if len(sys.argv) > 1 else None
        if main(save_dir) is None:
            sys.exit(1)
    except Exception as e:
        print(f"{Fore.RED}Fatal error running state graph compiler demo: {e}{Style.RESET_ALL}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
