import sys

from lrulog.cli import main

sys.exit(main())
