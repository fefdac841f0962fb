import sys

from sps.cli import main

sys.exit(main())
