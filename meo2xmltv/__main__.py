import sys

from meo2xmltv.cli import main

sys.exit(main())
