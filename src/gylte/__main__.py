import sys

from gylte.cli import main

sys.exit(main())
