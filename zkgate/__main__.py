import sys

from zkgate.cli import main

sys.exit(main())
