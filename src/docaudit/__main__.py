import sys

from docaudit.app import main

if __name__ == "__main__":
    sys.exit(main())
