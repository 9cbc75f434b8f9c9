import sys

from cyclewalk.cli import main

sys.exit(main())
