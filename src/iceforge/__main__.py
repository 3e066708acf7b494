import sys

from iceforge.cli import main

sys.exit(main())
