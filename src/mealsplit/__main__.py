import sys

from mealsplit.cli import main

sys.exit(main())
