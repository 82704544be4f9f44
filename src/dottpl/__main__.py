import sys

from dottpl.cli import main

sys.exit(main())
