# whiteboard_sim/main.py
"""
Main entry point for running the whiteboard simulator.
This simply calls the CLI's main function.
"""
from .cli import main as cli_main


def main():
    """Runs the command-line interface for the simulator."""
    cli_main()


if __name__ == "__main__":
    main()
