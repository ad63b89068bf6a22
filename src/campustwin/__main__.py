import sys

from campustwin.cli import main

sys.exit(main())
