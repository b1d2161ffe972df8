import sys

from crawldsl.cli import main

sys.exit(main())
