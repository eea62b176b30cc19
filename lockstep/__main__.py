"""Allow ``python -m lockstep``."""

from lockstep.experiments.cli import main

if __name__ == "__main__":
    main()
