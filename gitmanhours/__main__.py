import sys

from gitmanhours.cli import main

sys.exit(main())
