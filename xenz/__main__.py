import sys

from xenz.main import main

sys.exit(main())
