# file: main.py

import sys

from loan_expiration.job import main

if __name__ == "__main__":
    sys.exit(main())
