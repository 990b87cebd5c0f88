import sys

from mantl_install.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
