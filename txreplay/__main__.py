import sys

from txreplay.cli import main

sys.exit(main())
